"""
Tests for lexical scoring, score combination and result selection.
"""
import unittest
import sys
import os
import json
from unittest.mock import MagicMock, patch
import logging

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.hints import SearchHints
from models.hotel import Candidate
from models.settings import RankingConfig
from pipeline.lexical_scoring import count_occurrences, lexical_score
from pipeline.result_selection import result_count, select_results
from pipeline.results_ranking import (
    DeterministicRanking,
    LLMReranking,
    combine_scores,
    score_candidates,
)

# Disable logging during tests
logging.disable(logging.CRITICAL)


def make_candidate(hotel_id, price=120.0, combined=None, semantic=0.5, **kwargs):
    fields = {
        "id": hotel_id,
        "name": f"Hotel {hotel_id}",
        "description": "A comfortable stay",
        "location": "Melbourne",
        "price": price,
        "tier": None,
        "semantic_score": semantic,
        "combined_score": combined,
    }
    fields.update(kwargs)
    return Candidate(**fields)


class TestLexicalScore(unittest.TestCase):
    """Tests for the keyword scorer."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = RankingConfig()

    def test_more_occurrences_score_higher(self):
        three = make_candidate(1, description="quiet rooms, quiet garden, quiet street")
        one = make_candidate(2, description="quiet rooms, busy garden, loud street")

        score_three = lexical_score(three, ["quiet"], "", self.config)
        score_one = lexical_score(one, ["quiet"], "", self.config)

        self.assertGreater(score_three, score_one)

    def test_no_match_scores_zero(self):
        candidate = make_candidate(1, description="central location")

        self.assertEqual(lexical_score(candidate, ["beach"], "", self.config), 0.0)

    def test_score_within_bounds(self):
        candidate = make_candidate(1, name="pool", description="pool " * 200, amenities=["Pool"])

        score = lexical_score(candidate, ["pool"], "", self.config)

        self.assertGreaterEqual(score, 0.0)
        self.assertLessEqual(score, 1.0)

    def test_falls_back_to_query_words(self):
        candidate = make_candidate(1, description="rooftop pool with a view")

        with_match = lexical_score(candidate, [], "a pool in town", self.config)
        without_match = lexical_score(candidate, [], "a spa in town", self.config)

        self.assertGreater(with_match, without_match)

    def test_neutral_when_nothing_to_match(self):
        candidate = make_candidate(1)

        self.assertEqual(lexical_score(candidate, [], "a to", self.config), 0.5)
        self.assertEqual(lexical_score(candidate, [], "", self.config), 0.5)

    def test_matches_tier_and_amenities(self):
        candidate = make_candidate(1, description="nothing here", tier="Luxury", amenities=["Spa"])

        self.assertGreater(lexical_score(candidate, ["luxury", "spa"], "", self.config), 0.4)

    def test_regex_metacharacters_are_literal(self):
        self.assertEqual(count_occurrences("c++", "c++ and c++ lounge"), 2)
        self.assertEqual(count_occurrences("a.b", "axb"), 0)

    def test_coverage_weight(self):
        candidate = make_candidate(1, description="pool")

        # Half the keywords matched contributes 0.4 * 0.5 coverage
        score = lexical_score(candidate, ["pool", "spa"], "", self.config)
        self.assertGreater(score, 0.2)
        self.assertLess(score, lexical_score(candidate, ["pool"], "", self.config))


class TestCombineScores(unittest.TestCase):
    """Tests for the score combiner."""

    def test_range(self):
        for semantic in [-1.0, -0.3, 0.0, 0.7, 1.0]:
            for lexical in [0.0, 0.25, 1.0]:
                with self.subTest(semantic=semantic, lexical=lexical):
                    combined = combine_scores(semantic, lexical)
                    self.assertGreaterEqual(combined, 0.0)
                    self.assertLessEqual(combined, 1.0)

    def test_known_values(self):
        self.assertAlmostEqual(combine_scores(1.0, 1.0), 1.0)
        self.assertAlmostEqual(combine_scores(-1.0, 0.0), 0.0)
        self.assertAlmostEqual(combine_scores(0.0, 0.5), 0.5)
        self.assertAlmostEqual(combine_scores(0.6, 0.2, semantic_weight=0.75), 0.65)

    def test_deterministic(self):
        self.assertEqual(combine_scores(0.42, 0.31), combine_scores(0.42, 0.31))

    def test_score_candidates_annotates_copies(self):
        config = RankingConfig()
        original = make_candidate(1, description="quiet place", semantic=0.2)

        scored = score_candidates([original], SearchHints(keywords=("quiet",)), "", config)

        self.assertIsNone(original.lexical_score)
        self.assertIsNotNone(scored[0].lexical_score)
        self.assertAlmostEqual(
            scored[0].combined_score,
            combine_scores(0.2, scored[0].lexical_score, config.semantic_weight)
        )


class TestSelectResults(unittest.TestCase):
    """Tests for ordering and truncation."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = RankingConfig()

    def test_tie_break_by_price(self):
        expensive = make_candidate("a", price=300, combined=0.7)
        cheap = make_candidate("b", price=150, combined=0.7)

        result = select_results([expensive, cheap], SearchHints(), self.config)

        self.assertEqual([c.id for c in result], ["b", "a"])

    def test_relevance_orders_by_combined_score(self):
        candidates = [make_candidate(i, combined=score) for i, score in enumerate([0.2, 0.9, 0.5])]

        result = select_results(candidates, SearchHints(), self.config)

        self.assertEqual([c.id for c in result], [1, 2, 0])

    def test_price_asc_ignores_scores(self):
        candidates = [
            make_candidate(1, price=90, combined=0.1),
            make_candidate(2, price=45, combined=0.2),
            make_candidate(3, price=60, combined=0.9),
        ]

        result = select_results(candidates, SearchHints(sort_intent="price_asc"), self.config)

        self.assertEqual([c.price for c in result], [45, 60, 90])

    def test_price_desc(self):
        candidates = [make_candidate(i, price=p, combined=0.5) for i, p in enumerate([500, 1100, 800])]

        result = select_results(candidates, SearchHints(sort_intent="price_desc"), self.config)

        self.assertEqual([c.price for c in result], [1100, 800, 500])

    def test_price_sort_ties_use_combined_score(self):
        low = make_candidate(1, price=45, combined=0.3)
        high = make_candidate(2, price=45, combined=0.8)

        result = select_results([low, high], SearchHints(sort_intent="price_asc"), self.config)

        self.assertEqual([c.id for c in result], [2, 1])

    def test_bounds(self):
        for available, expected in [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4), (5, 5), (9, 5)]:
            with self.subTest(available=available):
                candidates = [make_candidate(i, combined=0.5) for i in range(available)]
                self.assertEqual(len(select_results(candidates, SearchHints(), self.config)), expected)
                self.assertEqual(result_count(available, self.config), expected)

    def test_custom_bounds(self):
        config = RankingConfig(min_results=1, max_results=2)
        candidates = [make_candidate(i, combined=0.5) for i in range(4)]

        self.assertEqual(len(select_results(candidates, SearchHints(), config)), 2)

    def test_uses_strategy_for_relevance(self):
        candidates = [make_candidate(i, combined=0.5) for i in range(3)]
        strategy = MagicMock()
        strategy.rank.return_value = list(reversed(candidates))

        result = select_results(candidates, SearchHints(), self.config, strategy=strategy, query="q")

        strategy.rank.assert_called_once()
        self.assertEqual([c.id for c in result], [2, 1, 0])

    def test_strategy_not_used_for_price_sort(self):
        strategy = MagicMock()

        select_results([make_candidate(1)], SearchHints(sort_intent="price_asc"), self.config, strategy=strategy)

        strategy.rank.assert_not_called()


class TestLLMReranking(unittest.TestCase):
    """Tests for the LLM re-ranking strategy."""

    def setUp(self):
        """Set up test fixtures."""
        self.candidates = [
            make_candidate(1, price=100, combined=0.9),
            make_candidate(2, price=200, combined=0.8),
            make_candidate(3, price=300, combined=0.7),
        ]

    def test_not_triggered_keeps_deterministic_order(self):
        llm = MagicMock()
        strategy = LLMReranking(llm=llm)

        result = strategy.rank(self.candidates, SearchHints(), "quiet hotel in Melbourne")

        self.assertEqual([c.id for c in result], [1, 2, 3])
        llm.invoke.assert_not_called()

    def test_is_triggered(self):
        self.assertTrue(LLMReranking.is_triggered("Which is the best value in Sydney?"))
        self.assertTrue(LLMReranking.is_triggered("khách sạn giá tốt"))
        self.assertFalse(LLMReranking.is_triggered("hotel in Sydney"))

    @patch('pipeline.results_ranking.RESULTS_RANKING_PROMPT')
    @patch('pipeline.results_ranking.safe_llm_call')
    def test_orders_by_llm_ids(self, mock_call, mock_prompt):
        mock_call.return_value = "[3, 1]"

        result = LLMReranking(llm=MagicMock()).rank(self.candidates, SearchHints(), "best value hotel")

        self.assertEqual([c.id for c in result], [3, 1, 2])

    @patch('pipeline.results_ranking.RESULTS_RANKING_PROMPT')
    @patch('pipeline.results_ranking.safe_llm_call')
    def test_unknown_ids_ignored(self, mock_call, mock_prompt):
        mock_call.return_value = "```json\n[99, 2]\n```"

        result = LLMReranking(llm=MagicMock()).rank(self.candidates, SearchHints(), "worth it?")

        self.assertEqual([c.id for c in result], [2, 1, 3])

    @patch('pipeline.results_ranking.RESULTS_RANKING_PROMPT')
    @patch('pipeline.results_ranking.safe_llm_call')
    def test_invalid_output_falls_back(self, mock_call, mock_prompt):
        mock_call.return_value = "I recommend hotel 3"

        result = LLMReranking(llm=MagicMock()).rank(self.candidates, SearchHints(), "recommend one")

        self.assertEqual([c.id for c in result], [1, 2, 3])

    @patch('pipeline.results_ranking.RESULTS_RANKING_PROMPT')
    @patch('pipeline.results_ranking.safe_llm_call')
    def test_non_list_output_falls_back(self, mock_call, mock_prompt):
        mock_call.return_value = '{"best": 3}'

        result = LLMReranking(llm=MagicMock()).rank(self.candidates, SearchHints(), "best deal")

        self.assertEqual([c.id for c in result], [1, 2, 3])

    @patch('pipeline.results_ranking.RESULTS_RANKING_PROMPT')
    @patch('pipeline.results_ranking.safe_llm_call')
    def test_exact_price_reaches_reranker(self, mock_call, mock_prompt):
        mock_call.return_value = "[2]"
        hints = SearchHints(location="Melbourne", exact_price=180)

        LLMReranking(llm=MagicMock()).rank(self.candidates, hints, "best value around town")

        sent_hints = json.loads(mock_call.call_args.kwargs["inputs"]["hints"])
        self.assertEqual(sent_hints["exact_price"], 180)

    def test_deterministic_ranking_orders_by_id_last(self):
        a = make_candidate("b", price=100, combined=0.5)
        b = make_candidate("a", price=100, combined=0.5)

        result = DeterministicRanking().rank([a, b], SearchHints())

        self.assertEqual([c.id for c in result], ["a", "b"])


if __name__ == '__main__':
    unittest.main()
