"""Session Store - per-session chat transcripts backed by the cache."""

import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from newsrag.cache.store import CacheStore, session_key
from newsrag.memory.models import ChatMessage, ChatResult, ClearResult, MessageRole
from newsrag.rag.pipeline import RagPipeline


logger = logging.getLogger(__name__)


_transcript = TypeAdapter(List[ChatMessage])


class SessionStore:
    """
    Session transcripts for multi-turn chat.

    Each turn is answered independently: the transcript is kept for display
    and is never added to the prompt. Saves replace the whole transcript and
    refresh its TTL.

    Note: read-modify-write is not locked. Concurrent messages on the same
    session can lose turns; the last save wins.
    """

    def __init__(
        self,
        pipeline: RagPipeline,
        cache: Optional[CacheStore] = None,
        ttl_seconds: int = 3600,
    ):
        """
        Initialize the session store.

        Args:
            pipeline: Pipeline used to answer each user message
            cache: Cache store holding transcripts
            ttl_seconds: Transcript expiry, refreshed on every save
        """
        self.pipeline = pipeline
        self.cache = cache or CacheStore.disabled()
        self.ttl_seconds = ttl_seconds

    async def get_history(self, session_id: str) -> List[ChatMessage]:
        """Load a transcript. Missing or unreadable transcripts are empty."""
        data = await self.cache.get_json(session_key(session_id))
        if data is None:
            return []
        try:
            return _transcript.validate_python(data)
        except PydanticValidationError as e:
            logger.error(f"Failed to parse session history for {session_id}: {e}")
            return []

    async def save_history(self, session_id: str, messages: List[ChatMessage]) -> None:
        """Persist the full transcript with a fresh TTL."""
        await self.cache.set_json(
            session_key(session_id),
            _transcript.dump_python(messages, mode="json"),
            self.ttl_seconds,
        )

    async def process_chat(self, session_id: str, user_message: str) -> ChatResult:
        """
        Run one chat turn.

        Appends the user message, answers it through the pipeline, appends
        the answer and saves. If the pipeline raises, nothing is saved.
        """
        history = await self.get_history(session_id)
        history.append(ChatMessage(role=MessageRole.USER, content=user_message))

        result = await self.pipeline.run_query(user_message)

        history.append(ChatMessage(role=MessageRole.ASSISTANT, content=result.answer))
        await self.save_history(session_id, history)

        logger.debug(f"Session {session_id} now has {len(history)} messages")

        return ChatResult(
            session_id=session_id,
            answer=result.answer,
            history=history,
            sources=result.sources,
            cached=result.cached,
        )

    async def clear_history(self, session_id: str) -> ClearResult:
        """Delete a transcript. Clearing an unknown session succeeds."""
        await self.cache.delete(session_key(session_id))
        logger.info(f"Session cleared: {session_id}")
        return ClearResult(session_id=session_id)
