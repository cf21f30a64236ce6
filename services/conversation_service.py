"""
Service for keeping the pending clarification context of each session.
"""
import logging
import time
from typing import Dict, Optional

from models.response import ConversationContext

logger = logging.getLogger(__name__)


class ConversationService:
    """Service for managing pending conversation context per session."""

    def __init__(self, cache_ttl: int = 3600):
        """
        Initialize the conversation service.

        Args:
            cache_ttl: Time-to-live for a pending context in seconds (default: 1 hour)
        """
        logger.info("Initializing conversation service")
        self.cache_ttl = cache_ttl

        # In-memory session store
        self._sessions: Dict[str, ConversationContext] = {}
        self._session_timestamps: Dict[str, float] = {}

    async def get_pending_context(self, session_id: str) -> Optional[ConversationContext]:
        """
        Get the pending clarification context for a session.

        Args:
            session_id: The session identifier

        Returns:
            The pending context, or None if there is none or it expired
        """
        self._clean_expired_sessions()

        context = self._sessions.get(session_id)
        if context is None:
            logger.debug(f"No pending context for session: {session_id}")
        else:
            logger.debug(f"Retrieved pending context for session: {session_id}")
        return context

    async def save_pending_context(self, session_id: str, context: ConversationContext):
        """
        Store the context of a clarification turn, replacing any previous one.

        Args:
            session_id: The session identifier
            context: Query and partial hints awaiting the user's answer
        """
        self._sessions[session_id] = context
        self._session_timestamps[session_id] = time.time()
        logger.debug(f"Saved pending context for session: {session_id}")

    async def clear_session(self, session_id: str) -> bool:
        """
        Clear the pending context of a session.

        Args:
            session_id: The session identifier

        Returns:
            True if the session existed
        """
        existed = self._sessions.pop(session_id, None) is not None
        self._session_timestamps.pop(session_id, None)

        logger.info(f"Cleared session: {session_id}")
        return existed

    def active_sessions(self) -> int:
        self._clean_expired_sessions()
        return len(self._sessions)

    def _clean_expired_sessions(self):
        """Remove expired sessions from memory."""
        current_time = time.time()
        expired_sessions = [
            session_id for session_id, timestamp in self._session_timestamps.items()
            if current_time - timestamp > self.cache_ttl
        ]

        for session_id in expired_sessions:
            self._sessions.pop(session_id, None)
            del self._session_timestamps[session_id]

        if expired_sessions:
            logger.info(f"Cleaned {len(expired_sessions)} expired sessions")
