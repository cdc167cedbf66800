"""Service configuration.

All settings come from the environment (or a local ``.env`` file). Connection
addresses follow one precedence rule: an explicit full URL wins over
host + port.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Query answers are cached for a fixed interval; only session TTL is tunable.
QUERY_CACHE_TTL_SECONDS = 600

QUERY_CACHE_PREFIX = "rag:news:"
RETRIEVAL_LIMIT = 5


class Settings(BaseSettings):
    """Configuration for the News RAG service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # Ignore unrelated keys from .env
        populate_by_name=True,
    )

    # Cache (Redis)
    redis_url: Optional[str] = None
    redis_host: str = "localhost"
    redis_port: int = 6379

    # Vector index (Qdrant)
    qdrant_url: Optional[str] = None
    qdrant_host: str = "qdrant"
    qdrant_port: int = 6333
    qdrant_collection: str = "news_articles"
    qdrant_api_key: Optional[str] = None

    # Embeddings (Jina)
    jina_api_key: Optional[str] = None
    jina_model: str = "jina-embeddings-v4"
    jina_url: str = "https://api.jina.ai/v1/embeddings"

    # Generation (Gemini)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"

    # Sessions and requests
    session_ttl: int = Field(default=3600, gt=0)
    request_timeout_seconds: float = Field(default=60.0, gt=0)
    require_provider_keys: bool = True

    # HTTP server
    host: str = "0.0.0.0"
    port: int = Field(default=3000, validation_alias=AliasChoices("BACKEND_PORT", "PORT", "port"))
    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def _resolve_url(url: Optional[str], scheme: str, host: str, port: int) -> str:
    if url and url.strip():
        return url.strip()
    return f"{scheme}://{host}:{port}"


def resolve_redis_url(settings: Settings) -> str:
    """
    Resolve the Redis connection URL.

    Precedence:
        1. REDIS_URL, when set and non-blank
        2. redis://REDIS_HOST:REDIS_PORT
    """
    return _resolve_url(settings.redis_url, "redis", settings.redis_host, settings.redis_port)


def resolve_qdrant_url(settings: Settings) -> str:
    """
    Resolve the Qdrant base URL (trailing slashes removed).

    Precedence:
        1. QDRANT_URL, when set and non-blank
        2. http://QDRANT_HOST:QDRANT_PORT
    """
    url = _resolve_url(settings.qdrant_url, "http", settings.qdrant_host, settings.qdrant_port)
    return url.rstrip("/")


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
