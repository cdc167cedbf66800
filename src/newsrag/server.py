"""
News RAG API Server

Exposes the RAG pipeline and chat sessions over REST.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from dotenv import load_dotenv

# Load environment variables (API keys)
load_dotenv()

from newsrag.config import get_settings
from newsrag.container import NewsRagContainer
from newsrag.errors import NewsRagError, ValidationError


# Configure Logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Data Models
class QueryRequest(BaseModel):
    query: Optional[str] = None


class ChatRequest(BaseModel):
    sessionId: Optional[str] = None
    userMessage: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(container: Optional[NewsRagContainer] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-built services (tests pass fakes here). When None the
            container is built from the environment at start-up.
    """
    settings = container.settings if container else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_container = app.state.container is None
        if owns_container:
            app.state.container = await NewsRagContainer.build(settings)
        try:
            yield
        finally:
            if owns_container:
                await app.state.container.close()

    app = FastAPI(title="News RAG API", version="1.0.0", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request body")

    def services(request: Request) -> NewsRagContainer:
        return request.app.state.container

    async def bounded(coro):
        return await asyncio.wait_for(coro, timeout=settings.request_timeout_seconds)

    # Routes
    @app.get("/health")
    async def health(request: Request):
        try:
            c = services(request)
            redis_ok = await c.cache.ping()
            return {
                "status": "ok",
                "message": "Backend is running",
                "redis": "connected" if redis_ok else "not_connected",
                "collectionName": c.settings.qdrant_collection,
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(status_code=500, content={"status": "error", "message": str(e)})

    @app.post("/api/query")
    async def query(req: QueryRequest, request: Request):
        """Answer a single question."""
        if not req.query or not req.query.strip():
            return _error(400, "query is required")

        try:
            result = await bounded(services(request).pipeline.run_query(req.query))
        except ValidationError as e:
            return _error(400, e.message)
        except asyncio.TimeoutError:
            logger.error("Timed out in /api/query")
            return _error(504, "Request timed out while processing RAG query.")
        except NewsRagError as e:
            logger.error(f"Error in /api/query: {e.message} (cause: {e.cause!r})")
            return _error(500, "Internal server error while processing RAG query.")

        return result.model_dump(mode="json")

    @app.post("/api/chat")
    async def chat(req: ChatRequest, request: Request):
        """Answer a message within a session and record both turns."""
        if not req.sessionId or not req.userMessage or not req.userMessage.strip():
            return _error(400, "sessionId and userMessage are required")

        try:
            result = await bounded(services(request).sessions.process_chat(req.sessionId, req.userMessage))
        except ValidationError as e:
            return _error(400, e.message)
        except asyncio.TimeoutError:
            logger.error("Timed out in /api/chat")
            return _error(504, "Request timed out while processing chat.")
        except NewsRagError as e:
            logger.error(f"Error in /api/chat: {e.message} (cause: {e.cause!r})")
            return _error(500, "Internal server error while processing chat.")

        return result.model_dump(mode="json", by_alias=True)

    @app.get("/api/session/{session_id}/history")
    async def session_history(session_id: str, request: Request):
        history = await services(request).sessions.get_history(session_id)
        return {
            "sessionId": session_id,
            "history": [m.model_dump(mode="json") for m in history],
        }

    @app.post("/api/session/{session_id}/clear")
    async def clear_session(session_id: str, request: Request):
        result = await services(request).sessions.clear_history(session_id)
        return result.model_dump(by_alias=True)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
