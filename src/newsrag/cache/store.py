"""Cache Store - Redis-backed key/value storage with TTL.

The store wraps an *optional* Redis handle. When no handle is available
(never connected, connection refused at start-up, or explicitly disabled)
every operation takes the same explicit branch: reads miss, writes and
deletes do nothing. Redis errors raised mid-call are downgraded the same way,
so callers never fail because the cache is down.
"""

import json
import logging
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from newsrag.config import QUERY_CACHE_PREFIX
from newsrag.errors import SerializationError


logger = logging.getLogger(__name__)


class CacheStore:
    """
    Shared cache handle used for query answers and session transcripts.

    A single instance is created at process start and used concurrently by
    all requests; redis-py's connection pool handles the concurrency.
    """

    def __init__(self, client: Optional[Redis] = None):
        """
        Initialize the cache store.

        Args:
            client: Connected async Redis client, or None to run without a cache
        """
        self._client = client

    @classmethod
    def disabled(cls) -> "CacheStore":
        """A store with no backing connection."""
        return cls(client=None)

    @classmethod
    async def connect(cls, url: str) -> "CacheStore":
        """
        Connect to Redis at ``url``.

        Returns a disabled store (and logs a warning) if the server cannot be
        reached, so the service still starts without caching.
        """
        client = Redis.from_url(url, decode_responses=True)
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning(f"Redis unavailable at {url}, running without cache: {e}")
            await client.aclose()
            return cls.disabled()

        logger.info(f"Redis connected: {url}")
        return cls(client=client)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None on miss or when the cache is down."""
        if self._client is None:
            return None
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` with an expiry. Best effort."""
        if self._client is None:
            return
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""
        if self._client is None:
            return
        try:
            await self._client.delete(key)
        except RedisError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")

    async def get_json(self, key: str) -> Optional[Any]:
        """Read and decode a JSON value. Corrupt entries count as a miss."""
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return decode_json(raw)
        except SerializationError as e:
            logger.warning(f"Ignoring corrupt cache entry {key}: {e.message}")
            return None

    async def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        await self.set(key, json.dumps(value), ttl_seconds)

    async def ping(self) -> bool:
        """Check the live connection."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def decode_json(raw: str) -> Any:
    """Decode a cached JSON document."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise SerializationError(f"Invalid cached JSON: {e}", cause=e)


def query_cache_key(query: str, prefix: str = QUERY_CACHE_PREFIX) -> str:
    """Cache key for a query: case and surrounding whitespace are ignored."""
    return f"{prefix}{normalize_query(query)}"


def session_key(session_id: str) -> str:
    return f"session:{session_id}:messages"


def normalize_query(query: str) -> str:
    return query.strip().lower()
