"""Shared test doubles for the News RAG tests."""

import asyncio
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from newsrag.cache import CacheStore
from newsrag.config import Settings
from newsrag.rag import RagPipeline, RetrievedPoint
from newsrag.memory import SessionStore


class InMemoryRedis:
    """Async Redis double: strings with recorded TTLs."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, key: str) -> int:
        self.ttls.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


class BrokenRedis(InMemoryRedis):
    """Redis double whose every call fails as if the server went away."""

    async def get(self, key):
        raise RedisConnectionError("connection lost")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("connection lost")

    async def delete(self, key):
        raise RedisConnectionError("connection lost")

    async def ping(self):
        raise RedisConnectionError("connection lost")


class FakeEmbedder:
    def __init__(self, vector: Optional[List[float]] = None, error: Optional[Exception] = None):
        self.vector = vector or [0.1, 0.2, 0.3]
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def embed(self, text: str, task: str = "retrieval.query") -> List[float]:
        self.calls.append((text, task))
        if self.error:
            raise self.error
        return self.vector


class FakeIndex:
    def __init__(self, points: Optional[List[RetrievedPoint]] = None, error: Optional[Exception] = None):
        self.points = points if points is not None else []
        self.error = error
        self.calls: List[Tuple[List[float], int]] = []

    async def search(self, vector: List[float], limit: int = 5) -> List[RetrievedPoint]:
        self.calls.append((vector, limit))
        if self.error:
            raise self.error
        return self.points[:limit]


class FakeGenerator:
    def __init__(self, answer: str = "Markets rallied on Monday.", delay: float = 0.0,
                 error: Optional[Exception] = None):
        self.answer = answer
        self.delay = delay
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def generate(self, query: str, context: str) -> str:
        self.calls.append((query, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.answer


def make_points() -> List[RetrievedPoint]:
    return [
        RetrievedPoint(
            id=101,
            score=0.91,
            payload={"title": "Stocks climb", "text": "Stocks rose 2% on Monday.", "url": "https://example.com/a"},
        ),
        RetrievedPoint(
            id="b7f1c0de-0000-4000-8000-000000000002",
            score=0.77,
            payload={"headline": "Rates hold", "content": "The central bank left rates unchanged."},
        ),
    ]


@pytest.fixture
def redis_double():
    return InMemoryRedis()


@pytest.fixture
def cache(redis_double):
    return CacheStore(client=redis_double)


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def index():
    return FakeIndex(points=make_points())


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def pipeline(embedder, index, generator, cache):
    return RagPipeline(embedder=embedder, index=index, generator=generator, cache=cache)


@pytest.fixture
def sessions(pipeline, cache):
    return SessionStore(pipeline=pipeline, cache=cache, ttl_seconds=3600)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jina_api_key="test-jina",
        gemini_api_key=None,
        qdrant_collection="news_articles",
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def broken_redis():
    return BrokenRedis()


@pytest.fixture
def points():
    return make_points()


@pytest.fixture
def fakes():
    """The fake provider classes, for tests that need custom behaviour."""
    return SimpleNamespace(
        Embedder=FakeEmbedder,
        Index=FakeIndex,
        Generator=FakeGenerator,
    )
