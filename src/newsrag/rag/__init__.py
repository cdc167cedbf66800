"""RAG module - retrieval-augmented answers over the news corpus."""

from newsrag.rag.models import (
    RetrievedPoint,
    Source,
    AnswerPayload,
)
from newsrag.rag.pipeline import RagPipeline, build_context, NO_CONTEXT_SENTINEL

__all__ = [
    "RetrievedPoint",
    "Source",
    "AnswerPayload",
    "RagPipeline",
    "build_context",
    "NO_CONTEXT_SENTINEL",
]
