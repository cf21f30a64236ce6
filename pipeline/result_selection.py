"""
Final ordering and truncation of candidates.
"""
import logging
from typing import List

from models.hints import SearchHints
from models.hotel import Candidate
from models.settings import RankingConfig
from models.state import SearchState
from pipeline.explanation import build_match_reasons, rank_hotels
from pipeline.results_ranking import DeterministicRanking

logger = logging.getLogger(__name__)


def result_count(available: int, config: RankingConfig) -> int:
    """Number of hotels to return: within [min_results, max_results], never more than available."""
    return min(available, config.max_results, max(config.min_results, available))


def select_results(
    candidates: List[Candidate],
    hints: SearchHints,
    config: RankingConfig,
    strategy=None,
    query: str = "",
) -> List[Candidate]:
    """
    Order candidates for the request and cut the list to the result bounds.

    Args:
        candidates: Scored, validated and context-filtered candidates
        hints: Search hints (sort_intent decides the ordering)
        config: Ranking configuration (result bounds)
        strategy: Ranking strategy for relevance ordering; deterministic by default
        query: Query text, passed to the strategy

    Returns:
        The selected candidates
    """
    if hints.sort_intent == "price_asc":
        ordered = sorted(candidates, key=lambda c: (c.price, -(c.combined_score or 0.0), str(c.id)))
    elif hints.sort_intent == "price_desc":
        ordered = sorted(candidates, key=lambda c: (-c.price, -(c.combined_score or 0.0), str(c.id)))
    else:
        strategy = strategy or DeterministicRanking()
        ordered = strategy.rank(candidates, hints, query)

    count = result_count(len(ordered), config)
    logger.info(f"Selected {count} of {len(candidates)} candidates (sort: {hints.sort_intent})")
    return ordered[:count]


def rank_results(state: SearchState, deps) -> SearchState:
    """
    Orders, truncates and explains the filtered candidates.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with ranked results and match reasons
    """
    hints = state["hints"]
    search_text = state.get("search_text") or state["query"]
    strategy = deps.ranking_strategy or DeterministicRanking()

    selected = select_results(
        state.get("filtered_results", []),
        hints,
        deps.config,
        strategy=strategy,
        query=search_text
    )
    ranked_results = rank_hotels(selected, hints)

    return {
        **state,
        "ranked_results": ranked_results,
        "match_reasons": build_match_reasons(ranked_results, hints),
        "metadata": {
            **(state.get("metadata", {})),
            "ranking_method": strategy.name if hints.sort_intent == "relevance" else hints.sort_intent,
            "returned_count": len(ranked_results)
        }
    }
