"""Cache module - Redis-backed storage for answers and session transcripts."""

from newsrag.cache.store import (
    CacheStore,
    normalize_query,
    query_cache_key,
    session_key,
)

__all__ = [
    "CacheStore",
    "normalize_query",
    "query_cache_key",
    "session_key",
]
