"""
Embedding Client (Jina)

Converts text into an embedding vector through the Jina embeddings API.
No retries happen here; a failed call surfaces as UpstreamError and the
caller decides what to do.
"""

import logging
from typing import List, Optional

import httpx

from newsrag.errors import UpstreamError


logger = logging.getLogger(__name__)


DEFAULT_JINA_URL = "https://api.jina.ai/v1/embeddings"
DEFAULT_JINA_MODEL = "jina-embeddings-v4"
EMBEDDING_TIMEOUT_SECONDS = 20.0


class EmbeddingClient:
    """
    Remote embedding provider.

    Each call opens a short-lived ``httpx.AsyncClient`` bounded by a 20 second
    timeout, so concurrent requests never share connection state.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_JINA_MODEL,
        url: str = DEFAULT_JINA_URL,
        timeout: float = EMBEDDING_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the embedding client.

        Args:
            api_key: Jina API key
            model: Embedding model name
            url: Embeddings endpoint
            timeout: Per-call timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.model = model
        self.url = url
        self.timeout = timeout
        self._transport = transport

        logger.info(f"Embedding Client initialized (model: {model})")

    async def embed(self, text: str, task: str = "retrieval.query") -> List[float]:
        """
        Embed ``text``.

        Args:
            text: Text to embed
            task: Provider task hint, e.g. "retrieval.query" or "retrieval.passage"

        Returns:
            The embedding vector

        Raises:
            UpstreamError: On missing credential, HTTP failure, timeout or a
                response without an embedding
        """
        if not self.api_key:
            raise UpstreamError("JINA_API_KEY not configured")

        payload = {
            "model": self.model,
            "task": task,
            "input": [{"text": text}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Embedding request timed out after {self.timeout}s")
            raise UpstreamError("Embedding request timed out", cause=e)
        except httpx.HTTPError as e:
            logger.error(f"Embedding request failed: {e}")
            raise UpstreamError(f"Embedding request failed: {e}", cause=e)
        except ValueError as e:
            raise UpstreamError("Embedding response was not valid JSON", cause=e)

        embedding = _extract_embedding(data)
        if not embedding:
            raise UpstreamError("No embedding returned from Jina")
        return embedding


def _extract_embedding(data) -> Optional[List[float]]:
    """Pull ``data[0].embedding`` out of a provider response, if present."""
    try:
        embedding = data["data"][0]["embedding"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(embedding, list):
        return None
    try:
        return [float(x) for x in embedding]
    except (TypeError, ValueError):
        return None
