"""
Run API Server

Starts the News RAG API with uvicorn. Logging goes through the format set
up in ``newsrag.server`` rather than uvicorn's own config.
"""

import logging
import sys

import uvicorn

from newsrag.config import get_settings, resolve_qdrant_url
from newsrag.server import app


logger = logging.getLogger("newsrag.run_server")


def main() -> int:
    settings = get_settings()

    if settings.require_provider_keys and not settings.jina_api_key:
        logger.error("JINA_API_KEY is not set; refusing to start")
        return 1

    logger.info(f"Vector index: {resolve_qdrant_url(settings)} (collection: {settings.qdrant_collection})")
    logger.info(f"Listening on http://{settings.host}:{settings.port} (docs at /docs)")

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
