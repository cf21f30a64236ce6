"""
Telemetry component for the search pipeline.
"""
import logging
import time

from models.state import SearchState

logger = logging.getLogger(__name__)

# State key -> pipeline stage that produced it
STAGE_OUTPUTS = {
    "hints": "interpret_query",
    "retrieval_results": "retrieve_results",
    "scored_results": "score_results",
    "validated_results": "validate_results",
    "filtered_results": "filter_by_context",
    "ranked_results": "select_results",
    "response": "build_response",
}


def add_telemetry(state: SearchState) -> SearchState:
    """
    Adds telemetry data to the search state.

    Args:
        state: The current search state

    Returns:
        Updated state with telemetry data
    """
    metadata = dict(state.get("metadata", {}))

    metadata["process_complete_timestamp"] = time.time()
    if "query_timestamp" in metadata:
        metadata["total_execution_time"] = (
            metadata["process_complete_timestamp"] - metadata["query_timestamp"]
        )

    metadata["stage_counts"] = {
        "retrieved": len(state.get("retrieval_results") or []),
        "validated": len(state.get("validated_results") or []),
        "filtered": len(state.get("filtered_results") or []),
        "context_removed": len(state.get("removed_results") or []),
        "returned": len(state.get("ranked_results") or []),
    }
    metadata["branch"] = state.get("response_type")
    metadata["pipeline_components_executed"] = _count_components_executed(state)

    logger.debug(f"Added telemetry data: branch={metadata['branch']}, "
                 f"stages={metadata['stage_counts']}")

    return {**state, "metadata": metadata}


def _count_components_executed(state: SearchState) -> int:
    """
    Count how many pipeline stages left output in the state.

    Args:
        state: The current search state

    Returns:
        Number of stages executed
    """
    return sum(1 for key in STAGE_OUTPUTS if state.get(key) is not None)
