"""Service container - builds the long-lived provider clients once per process."""

import logging
from typing import Optional

from newsrag.cache import CacheStore
from newsrag.clients import EmbeddingClient, GenerationClient, VectorIndexClient
from newsrag.config import Settings, resolve_qdrant_url, resolve_redis_url
from newsrag.errors import ConfigurationError
from newsrag.memory import SessionStore
from newsrag.rag import RagPipeline


logger = logging.getLogger(__name__)


class NewsRagContainer:
    """Holds the long-lived service objects for one process."""

    def __init__(
        self,
        settings: Settings,
        cache: CacheStore,
        pipeline: RagPipeline,
        sessions: SessionStore,
        index: Optional[VectorIndexClient] = None,
    ):
        self.settings = settings
        self.cache = cache
        self.pipeline = pipeline
        self.sessions = sessions
        self.index = index

    @classmethod
    async def build(cls, settings: Settings) -> "NewsRagContainer":
        """Connect to every provider. Fails fast on missing required keys."""
        if settings.require_provider_keys and not settings.jina_api_key:
            raise ConfigurationError("JINA_API_KEY is not set")
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; answers will use the fallback message")

        cache = await CacheStore.connect(resolve_redis_url(settings))

        embedder = EmbeddingClient(
            api_key=settings.jina_api_key,
            model=settings.jina_model,
            url=settings.jina_url,
        )
        index = VectorIndexClient(
            url=resolve_qdrant_url(settings),
            collection_name=settings.qdrant_collection,
            api_key=settings.qdrant_api_key,
        )
        index.initialize()
        generator = GenerationClient(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
        )

        pipeline = RagPipeline(embedder=embedder, index=index, generator=generator, cache=cache)
        sessions = SessionStore(pipeline=pipeline, cache=cache, ttl_seconds=settings.session_ttl)

        logger.info("News RAG components initialized")
        return cls(settings=settings, cache=cache, pipeline=pipeline, sessions=sessions, index=index)

    async def close(self) -> None:
        await self.cache.close()
        if self.index is not None:
            await self.index.close()
