"""
Main search service for handling hotel search requests.
"""
import asyncio
import logging
import time
from typing import Optional, Union

from config import APP_CONFIG, FEATURES
from models.response import ClarificationResponse, ConversationContext, ResultsResponse
from models.state import SearchState
from pipeline.dependencies import SearchDependencies
from pipeline.graph import build_default_dependencies, build_search_graph
from pipeline.response_generation import to_response
from services.conversation_service import ConversationService
from utils.errors import HotelSearchError
from utils.monitoring import SearchSystemMonitor

logger = logging.getLogger(__name__)

SearchResponse = Union[ClarificationResponse, ResultsResponse]


class HotelSearchService:
    """Service for handling hotel search requests."""

    def __init__(
        self,
        deps: Optional[SearchDependencies] = None,
        conversation_service: Optional[ConversationService] = None,
        monitor: Optional[SearchSystemMonitor] = None,
    ):
        """
        Initialize the search service.

        Args:
            deps: Pipeline collaborators; production wiring is built on first use when None
            conversation_service: Store of pending clarification context
            monitor: Metrics aggregator
        """
        logger.info("Initializing hotel search service")
        self._deps = deps
        self._search_executor = None
        self.conversation_service = conversation_service or ConversationService(
            cache_ttl=APP_CONFIG["session_ttl"]
        )
        self.monitor = monitor or SearchSystemMonitor()

    @property
    def search_executor(self):
        if self._search_executor is None:
            if self._deps is None:
                self._deps = build_default_dependencies()
            self._search_executor = build_search_graph(self._deps)
        return self._search_executor

    async def search(
        self,
        query: str,
        conversation_context: Optional[ConversationContext] = None,
        session_id: Optional[str] = None,
    ) -> SearchResponse:
        """
        Execute a hotel search for one user turn.

        Args:
            query: The user message
            conversation_context: Pending clarification context; looked up by
                session id when not given
            session_id: Optional session identifier for follow-up turns

        Returns:
            ClarificationResponse when the city is unknown, ResultsResponse otherwise

        Raises:
            ParseError: If the query could not be interpreted
            RetrievalError: If embedding or retrieval failed
        """
        start_time = time.time()

        if conversation_context is None and session_id and FEATURES["use_conversation_context"]:
            conversation_context = await self.conversation_service.get_pending_context(session_id)

        initial_state = self._initial_state(query, conversation_context, start_time)

        try:
            logger.info(f"Starting search pipeline execution for query: '{query}'")
            result = await asyncio.to_thread(self.search_executor.invoke, initial_state)
        except HotelSearchError as e:
            execution_time = time.time() - start_time
            logger.error(f"Search failed: {str(e)}")
            self.monitor.log_search(query, {**initial_state, "error": str(e)}, execution_time)
            raise

        response = to_response(result)

        if session_id:
            await self._update_session(session_id, result, response)

        execution_time = time.time() - start_time
        self.monitor.log_search(query, result, execution_time)
        logger.info(f"Search completed in {execution_time:.2f}s, "
                    f"type: {response.type}, intent: {result.get('metadata', {}).get('query_intent', 'n/a')}")

        return response

    def _initial_state(
        self,
        query: str,
        conversation_context: Optional[ConversationContext],
        start_time: float,
    ) -> SearchState:
        """
        Build the graph input, merging a pending clarification turn into the search text.

        Args:
            query: The user message
            conversation_context: Pending clarification context, if any
            start_time: Request start timestamp

        Returns:
            Initial search state
        """
        query = query or ""
        search_text = query.strip()
        if conversation_context is not None and conversation_context.previous_query:
            search_text = f"{conversation_context.previous_query} {search_text}".strip()

        return SearchState(
            query=query,
            search_text=search_text,
            conversation_context=conversation_context,
            input_validation_error=None,
            error=None,
            metadata={
                "query_timestamp": start_time,
                "conversation_aware": conversation_context is not None
            }
        )

    async def _update_session(self, session_id: str, result: SearchState, response: SearchResponse):
        """
        Keep the pending context after a clarification, drop it after results.

        Args:
            session_id: The session identifier
            result: Final graph state
            response: The response returned to the caller
        """
        if response.type == "clarification":
            await self.conversation_service.save_pending_context(
                session_id,
                ConversationContext(
                    previous_query=result.get("search_text") or None,
                    partial_hints=response.partial_hints
                )
            )
        else:
            await self.conversation_service.clear_session(session_id)
