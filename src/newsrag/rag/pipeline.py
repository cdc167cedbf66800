"""RAG Pipeline - cache-aside question answering over the news index."""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from newsrag.cache.store import CacheStore, query_cache_key
from newsrag.config import QUERY_CACHE_TTL_SECONDS, RETRIEVAL_LIMIT
from newsrag.errors import (
    EmbeddingFailed,
    GenerationFailed,
    NotInitialized,
    RetrievalFailed,
    ValidationError,
)
from newsrag.rag.models import AnswerPayload, RetrievedPoint, Source


logger = logging.getLogger(__name__)


NO_CONTEXT_SENTINEL = "No relevant articles found."
SECTION_DELIMITER = "\n\n---\n\n"


class Embedder(Protocol):
    async def embed(self, text: str, task: str = "retrieval.query") -> List[float]: ...


class VectorSearcher(Protocol):
    async def search(self, vector: List[float], limit: int = 5) -> List[RetrievedPoint]: ...


class AnswerGenerator(Protocol):
    async def generate(self, query: str, context: str) -> str: ...


def build_context(points: Sequence[RetrievedPoint]) -> str:
    """
    Build the grounding context from retrieved articles.

    Each article becomes a ``### title`` section; sections are separated by
    a horizontal rule. An empty result produces the no-articles sentinel,
    which is still sent to the model.
    """
    if not points:
        return NO_CONTEXT_SENTINEL

    sections = []
    for idx, point in enumerate(points, 1):
        sections.append(_format_section(point.payload or {}, idx))
    return SECTION_DELIMITER.join(sections)


def _format_section(payload: Dict[str, Any], position: int) -> str:
    title = payload.get("title") or payload.get("headline") or f"Article {position}"
    text = payload.get("text") or payload.get("content") or payload.get("body")
    if not text:
        text = json.dumps(payload, indent=2, default=str)
    return f"### {title}\n{text}"


class RagPipeline:
    """
    Orchestrates one query end to end.

    Flow (strictly sequential):
        cache lookup -> embed -> search -> build context -> generate -> cache write

    A cache hit skips retrieval and generation entirely. Failed attempts are
    never cached.
    """

    def __init__(
        self,
        embedder: Embedder,
        index: VectorSearcher,
        generator: AnswerGenerator,
        cache: Optional[CacheStore] = None,
        retrieval_limit: int = RETRIEVAL_LIMIT,
        cache_ttl: int = QUERY_CACHE_TTL_SECONDS,
    ):
        """
        Initialize the pipeline with its collaborators.

        Args:
            embedder: Text -> vector provider
            index: Vector similarity search
            generator: Answer generation
            cache: Cache store; None runs the pipeline uncached
            retrieval_limit: Number of articles retrieved per query
            cache_ttl: Expiry for cached answers, in seconds
        """
        self.embedder = embedder
        self.index = index
        self.generator = generator
        self.cache = cache or CacheStore.disabled()
        self.retrieval_limit = retrieval_limit
        self.cache_ttl = cache_ttl

    async def run_query(self, query: str) -> AnswerPayload:
        """
        Answer ``query``.

        Raises:
            ValidationError: Query is empty or whitespace
            EmbeddingFailed / RetrievalFailed / GenerationFailed: An upstream
                stage failed; nothing was cached
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("query is required")

        key = query_cache_key(query)

        cached = await self._read_cached(key)
        if cached is not None:
            logger.info(f"Cache hit: {key}")
            return cached.model_copy(update={"cached": True})

        logger.info(f"Cache miss, running retrieval: {query[:100]}")

        try:
            vector = await self.embedder.embed(query, "retrieval.query")
        except NotInitialized:
            raise
        except Exception as e:
            raise EmbeddingFailed(f"Embedding failed: {e}", cause=e)

        try:
            points = await self.index.search(vector, limit=self.retrieval_limit)
        except NotInitialized:
            raise
        except Exception as e:
            raise RetrievalFailed(f"Retrieval failed: {e}", cause=e)

        context = build_context(points)

        try:
            answer = await self.generator.generate(query, context)
        except Exception as e:
            raise GenerationFailed(f"Generation failed: {e}", cause=e)

        payload = AnswerPayload(
            answer=answer,
            sources=[Source.from_point(p) for p in points],
            cached=False,
        )

        await self._write_cached(key, payload)
        return payload

    async def _read_cached(self, key: str) -> Optional[AnswerPayload]:
        data = await self.cache.get_json(key)
        if data is None:
            return None
        try:
            return AnswerPayload.model_validate(data)
        except ValueError as e:
            logger.warning(f"Cached payload for {key} has unexpected shape, ignoring: {e}")
            return None

    async def _write_cached(self, key: str, payload: AnswerPayload) -> None:
        # The answer already exists; a failed write must not reach the caller.
        try:
            await self.cache.set_json(key, payload.model_dump(mode="json"), self.cache_ttl)
        except Exception as e:
            logger.error(f"Failed to cache answer for {key}: {e}")
