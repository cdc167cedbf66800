"""Error taxonomy for the News RAG service."""

from typing import Optional


class NewsRagError(Exception):
    """Base class for all service errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(self.message)


class ValidationError(NewsRagError):
    """Bad caller input. Detected before any remote call (HTTP 400)."""


class UpstreamError(NewsRagError):
    """An embedding, retrieval or generation provider failed (HTTP 500)."""


class EmbeddingFailed(UpstreamError):
    """The embedding stage of the pipeline failed."""


class RetrievalFailed(UpstreamError):
    """The vector search stage of the pipeline failed."""


class GenerationFailed(UpstreamError):
    """The answer generation stage of the pipeline failed."""


class NotInitialized(NewsRagError):
    """A provider client was used before it was set up."""


class SerializationError(NewsRagError):
    """A cached value could not be decoded. Always handled as a cache miss."""


class ConfigurationError(NewsRagError):
    """A required provider setting is missing at start-up."""
