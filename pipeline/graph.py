"""
Graph structure for the LangGraph search pipeline.
"""
import logging
from functools import partial
from typing import Optional

from langgraph.graph import StateGraph, END

from config import APP_CONFIG, FEATURES, SEARCH_CONFIG, get_ranking_config
from data.statistics import CatalogStatistics
from models.state import SearchState
from pipeline.context_filter import filter_by_context
from pipeline.dependencies import SearchDependencies
from pipeline.input_validation import validate_input
from pipeline.query_interpreter import extract_hints, parse_query_with_llm
from pipeline.response_generation import build_response, handle_no_results, request_clarification
from pipeline.result_selection import rank_results
from pipeline.result_validation import validate_results
from pipeline.results_ranking import DeterministicRanking, LLMReranking, score_results
from pipeline.telemetry import add_telemetry
from pipeline.vector_search import retrieve_results

logger = logging.getLogger(__name__)


def build_default_dependencies(statistics_path: Optional[str] = None) -> SearchDependencies:
    """
    Wire the production collaborators from configuration.

    Args:
        statistics_path: Optional override of the statistics file location

    Returns:
        SearchDependencies
    """
    # Imported here so tests with mocked collaborators never load the model stack
    from vectordb.embeddings import EmbeddingGenerator
    from vectordb.vector_store import HotelVectorStore

    config = get_ranking_config()
    ranking_strategy = LLMReranking() if FEATURES["use_llm_reranking"] else DeterministicRanking()

    return SearchDependencies(
        config=config,
        parser=parse_query_with_llm,
        embedder=EmbeddingGenerator(),
        retriever=HotelVectorStore(
            max_attempts=SEARCH_CONFIG["retrieval_max_attempts"],
            retry_delay=SEARCH_CONFIG["retrieval_retry_delay"]
        ),
        statistics=CatalogStatistics.from_file(statistics_path or APP_CONFIG["statistics_path"]),
        ranking_strategy=ranking_strategy,
        max_query_length=APP_CONFIG["max_query_length"]
    )


def build_search_graph(deps: SearchDependencies):
    """
    Create the LangGraph for the hotel search system.

    Args:
        deps: Collaborators bound into the nodes

    Returns:
        Compiled graph
    """
    graph = StateGraph(SearchState)

    # Add all nodes
    graph.add_node("validate_input", partial(validate_input, deps=deps))
    graph.add_node("interpret_query", partial(extract_hints, deps=deps))
    graph.add_node("request_clarification", request_clarification)
    graph.add_node("retrieve_results", partial(retrieve_results, deps=deps))
    graph.add_node("score_results", partial(score_results, deps=deps))
    graph.add_node("validate_results", partial(validate_results, deps=deps))
    graph.add_node("filter_by_context", partial(filter_by_context, deps=deps))
    graph.add_node("rank_results", partial(rank_results, deps=deps))
    graph.add_node("handle_no_results", partial(handle_no_results, deps=deps))
    graph.add_node("build_response", build_response)
    graph.add_node("add_telemetry", add_telemetry)

    # Define simple edges
    graph.add_edge("retrieve_results", "score_results")
    graph.add_edge("score_results", "validate_results")
    graph.add_edge("validate_results", "filter_by_context")
    graph.add_edge("filter_by_context", "rank_results")

    # Empty queries skip interpretation and go straight to clarification
    def is_empty_query(state):
        return state.get("input_validation_error") == "EMPTY_QUERY"

    graph.add_conditional_edges(
        "validate_input",
        is_empty_query,
        {True: "request_clarification", False: "interpret_query"}
    )

    def has_location(state):
        hints = state.get("hints")
        return hints is not None and hints.location is not None

    graph.add_conditional_edges(
        "interpret_query",
        has_location,
        {True: "retrieve_results", False: "request_clarification"}
    )

    def check_no_results(state):
        return not state.get("ranked_results")

    graph.add_conditional_edges(
        "rank_results",
        check_no_results,
        {True: "handle_no_results", False: "build_response"}
    )

    # Connect all endpoints to telemetry
    graph.add_edge("request_clarification", "add_telemetry")
    graph.add_edge("handle_no_results", "add_telemetry")
    graph.add_edge("build_response", "add_telemetry")

    graph.add_edge("add_telemetry", END)

    graph.set_entry_point("validate_input")

    logger.info("Search pipeline graph built successfully")
    return graph.compile()
