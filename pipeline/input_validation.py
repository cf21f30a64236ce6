"""
Input validation components for the search pipeline.
"""
import logging

from models.state import SearchState
from utils.errors import ParseError

logger = logging.getLogger(__name__)


def validate_input(state: SearchState, deps) -> SearchState:
    """
    Validates the user input query.

    An empty query is not an error: it is routed to the clarification branch
    like any other request without a location.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with validation results

    Raises:
        ParseError: If the query exceeds the configured maximum length
    """
    query = state.get("query") or ""
    validation_error = None

    logger.debug(f"Validating query: {query}")

    if not query.strip():
        validation_error = "EMPTY_QUERY"
        logger.info("Query validation: empty query, asking for clarification")

    elif len(query) > deps.max_query_length:
        logger.info(f"Query validation failed: Query too long ({len(query)} chars)")
        raise ParseError(f"Query exceeds {deps.max_query_length} characters")

    return {
        **state,
        "query": query.strip(),
        "input_validation_error": validation_error,
        "metadata": {
            **(state.get("metadata", {})),
            "query_length": len(query)
        }
    }
