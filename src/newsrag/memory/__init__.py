"""Memory module - session transcripts for multi-turn chat."""

from newsrag.memory.session import SessionStore
from newsrag.memory.models import ChatMessage, ChatResult, ClearResult, MessageRole

__all__ = [
    "SessionStore",
    "ChatMessage",
    "ChatResult",
    "ClearResult",
    "MessageRole",
]
