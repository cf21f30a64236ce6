"""
Response generation component for the search pipeline.
"""
import logging
from typing import Union

from models.hints import SearchHints
from models.response import ClarificationResponse, ResultsResponse
from models.state import SearchState
from pipeline.explanation import build_no_results_message, build_results_message

logger = logging.getLogger(__name__)

CLARIFICATION_MESSAGE = (
    "I can help you find a hotel, but first tell me which city you want: "
    "Melbourne, Sydney, or Brisbane?"
)


def request_clarification(state: SearchState) -> SearchState:
    """
    Asks the user for the missing location.

    Args:
        state: The current search state

    Returns:
        Updated state with a clarification response
    """
    logger.info("Location missing, asking for clarification")

    hints = state.get("hints")
    context = state.get("conversation_context")
    if hints is None and context is not None:
        hints = context.partial_hints

    return {
        **state,
        "hints": hints or SearchHints(),
        "response_type": "clarification",
        "response": CLARIFICATION_MESSAGE,
        "ranked_results": [],
        "match_reasons": []
    }


def handle_no_results(state: SearchState, deps) -> SearchState:
    """
    Builds the empty-results response.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction (catalog statistics)

    Returns:
        Updated state with a results response and no hotels
    """
    logger.info("No hotels matched the request")

    hints = state["hints"]
    tier_range = deps.statistics.get_recommended_price_range(hints.tier) if hints.tier else None

    return {
        **state,
        "response_type": "results",
        "response": build_no_results_message(hints, tier_range),
        "ranked_results": [],
        "match_reasons": [],
        "metadata": {
            **(state.get("metadata", {})),
            "no_results_found": True
        }
    }


def build_response(state: SearchState) -> SearchState:
    """
    Builds the summary message for the ranked hotels.

    Args:
        state: The current search state

    Returns:
        Updated state with generated response
    """
    ranked_results = state["ranked_results"]
    response = build_results_message(ranked_results, state["hints"])

    logger.info(f"Response generated for {len(ranked_results)} hotels")

    return {
        **state,
        "response_type": "results",
        "response": response
    }


def to_response(state: SearchState) -> Union[ClarificationResponse, ResultsResponse]:
    """
    Convert the final graph state into the caller-facing response.

    Args:
        state: The final search state

    Returns:
        ClarificationResponse or ResultsResponse
    """
    hints = state.get("hints") or SearchHints()

    if state.get("response_type") == "clarification":
        return ClarificationResponse(
            message=state.get("response") or CLARIFICATION_MESSAGE,
            missing_fields=["location"],
            partial_hints=hints
        )

    return ResultsResponse(
        message=state.get("response") or build_no_results_message(hints),
        hints=hints,
        hotels=state.get("ranked_results", []),
        match_reasons=state.get("match_reasons", [])
    )
