"""
Results ranking component for the search pipeline.
"""
import json
import logging
import re
from typing import Any, Dict, List

from models.hints import SearchHints
from models.hotel import Candidate
from models.settings import RankingConfig
from models.state import SearchState
from pipeline.lexical_scoring import lexical_score
from utils.llm import get_llm, safe_llm_call, strip_code_fences
from utils.prompts import RESULTS_RANKING_PROMPT

logger = logging.getLogger(__name__)

# Phrases asking for a judgement the combined score cannot express
VALUE_TRIGGER_PHRASES = [
    "best value",
    "good value",
    "value for money",
    "best deal",
    "worth it",
    "recommend",
    "giá tốt",
    "đáng tiền",
]


def combine_scores(semantic: float, lexical: float, semantic_weight: float = 0.5) -> float:
    """
    Blend a semantic similarity in [-1, 1] with a lexical score in [0, 1].

    Returns:
        Combined score in [0, 1]
    """
    semantic_normalized = (semantic + 1) / 2
    return semantic_normalized * semantic_weight + lexical * (1 - semantic_weight)


def score_candidates(
    candidates: List[Candidate],
    hints: SearchHints,
    query: str,
    config: RankingConfig,
) -> List[Candidate]:
    """
    Annotate every candidate with its lexical and combined scores.

    Args:
        candidates: Retrieved candidates
        hints: Search hints (keywords are the lexical terms)
        query: Text used for the keyword fallback
        config: Ranking configuration

    Returns:
        Scored copies, in the input order
    """
    scored = []
    for candidate in candidates:
        lexical = lexical_score(candidate, hints.keywords, query, config)
        combined = combine_scores(candidate.semantic_score, lexical, config.semantic_weight)
        scored.append(candidate.model_copy(update={
            "lexical_score": lexical,
            "combined_score": combined,
        }))
    return scored


def _id_key(candidate: Candidate) -> str:
    return str(candidate.id)


class DeterministicRanking:
    """Combined score descending, then price ascending, then id."""

    name = "deterministic"

    def rank(self, candidates: List[Candidate], hints: SearchHints, query: str = "") -> List[Candidate]:
        return sorted(
            candidates,
            key=lambda c: (-(c.combined_score or 0.0), c.price, _id_key(c)),
        )


class LLMReranking:
    """
    Lets the chat model order the candidates for vague value questions
    ("best value", "worth it", ...).

    Any failure falls back to the deterministic order. Unknown ids are
    ignored and unmentioned candidates follow in deterministic order.
    """

    name = "llm"

    def __init__(self, llm=None, fallback: DeterministicRanking = None):
        self._llm = llm
        self.fallback = fallback or DeterministicRanking()

    @staticmethod
    def is_triggered(query: str) -> bool:
        query_lower = query.lower()
        return any(phrase in query_lower for phrase in VALUE_TRIGGER_PHRASES)

    def rank(self, candidates: List[Candidate], hints: SearchHints, query: str = "") -> List[Candidate]:
        baseline = self.fallback.rank(candidates, hints, query)
        if len(baseline) < 2 or not self.is_triggered(query):
            return baseline

        logger.info(f"Re-ranking {len(baseline)} candidates with LLM for query: '{query}'")

        chain = RESULTS_RANKING_PROMPT | (self._llm or get_llm())
        ranking_text = safe_llm_call(
            chain=chain,
            inputs={
                "query": query,
                "hints": hints.model_dump_json(exclude_defaults=True),
                "hotels": json.dumps(self._describe(baseline), ensure_ascii=False),
            },
            default_response="[]"
        )

        try:
            ranked_ids = json.loads(strip_code_fences(ranking_text or "[]"))
        except json.JSONDecodeError:
            logger.warning(f"Failed to parse JSON from re-ranking, keeping score order: {ranking_text}")
            return baseline

        if not isinstance(ranked_ids, list):
            logger.warning("Re-ranking did not return a list, keeping score order")
            return baseline

        by_id = {_id_key(c): c for c in baseline}
        ordered = []
        for hotel_id in ranked_ids:
            candidate = by_id.pop(str(hotel_id), None)
            if candidate is not None:
                ordered.append(candidate)

        # Unmentioned candidates keep their deterministic order
        ordered.extend(c for c in baseline if _id_key(c) in by_id)
        logger.info(f"LLM re-ranking placed {len(baseline) - len(by_id)} of {len(baseline)} candidates")
        return ordered

    @staticmethod
    def _describe(candidates: List[Candidate]) -> List[Dict[str, Any]]:
        return [
            {
                "id": c.id,
                "name": c.name,
                "price_per_night": c.price,
                "tier": c.tier,
                "amenities": list(c.amenities),
                "description": re.sub(r"\s+", " ", c.description)[:300],
            }
            for c in candidates
        ]


def score_results(state: SearchState, deps) -> SearchState:
    """
    Computes lexical and combined scores for the retrieved candidates.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with scored results
    """
    retrieval_results = state.get("retrieval_results", [])
    search_text = state.get("search_text") or state["query"]

    scored_results = score_candidates(retrieval_results, state["hints"], search_text, deps.config)
    logger.info(f"Scored {len(scored_results)} candidates "
                f"(semantic weight {deps.config.semantic_weight})")

    return {
        **state,
        "scored_results": scored_results,
        "metadata": {
            **(state.get("metadata", {})),
            "scored_count": len(scored_results)
        }
    }
