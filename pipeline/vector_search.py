"""
Vector search component for the search pipeline.
"""
import logging

from models.state import SearchState

logger = logging.getLogger(__name__)


def retrieve_results(state: SearchState, deps) -> SearchState:
    """
    Embeds the search text and retrieves candidates under the hard constraints.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with retrieval results

    Raises:
        RetrievalError: If embedding or retrieval fails
    """
    hints = state["hints"]
    search_text = state.get("search_text") or state["query"]

    logger.info(f"Performing vector search with query: {search_text}")

    query_vector = deps.embedder.generate_query_embedding(search_text)
    retrieval_results = deps.retriever.retrieve(
        query_vector,
        location=hints.location,
        min_price=hints.min_price,
        max_price=hints.max_price,
        tier=hints.tier,
        amenities=hints.amenities,
        limit=deps.config.retrieval_limit
    )

    logger.info(f"Vector search found {len(retrieval_results)} results")

    metadata = {
        **(state.get("metadata", {})),
        "vector_search_result_count": len(retrieval_results)
    }

    if not retrieval_results:
        metadata["no_results_found"] = True
        logger.warning("No results found for vector search")

    return {
        **state,
        "query_vector": query_vector,
        "retrieval_results": retrieval_results,
        "metadata": metadata
    }
