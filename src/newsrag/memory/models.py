"""Memory models for session transcripts and chat turns."""

from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field

from newsrag.rag.models import Source


class MessageRole(str, Enum):
    """Role in a conversation message."""
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in a session transcript."""

    model_config = ConfigDict(use_enum_values=True)

    role: MessageRole = Field(description="Who sent this message")
    content: str = Field(description="Message content")


class ChatResult(BaseModel):
    """Result of one chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    answer: str
    history: List[ChatMessage] = Field(default_factory=list)
    sources: List[Source] = Field(default_factory=list)
    cached: bool = False


class ClearResult(BaseModel):
    """Acknowledgement of a cleared session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    cleared: bool = True
