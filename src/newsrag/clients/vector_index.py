"""Vector Index Client - similarity search over the news collection in Qdrant."""

import logging
from typing import List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from newsrag.errors import NotInitialized, UpstreamError
from newsrag.rag.models import RetrievedPoint


logger = logging.getLogger(__name__)


class VectorIndexClient:
    """
    Qdrant-backed nearest-neighbour search.

    The client must be bound to a collection with ``initialize()`` before the
    first search. Results keep the order the provider returns them in.
    """

    def __init__(self, url: str, collection_name: str, api_key: Optional[str] = None):
        """
        Args:
            url: Qdrant base URL
            collection_name: Collection holding the news articles
            api_key: Optional Qdrant API key
        """
        self.url = url.rstrip("/")
        self.collection_name = collection_name
        self.api_key = api_key
        self._client: Optional[AsyncQdrantClient] = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def initialize(self, client: Optional[AsyncQdrantClient] = None) -> None:
        """Create (or adopt) the underlying Qdrant client."""
        self._client = client or AsyncQdrantClient(url=self.url, api_key=self.api_key)
        logger.info(f"Vector Index Client initialized: {self.url} (collection: {self.collection_name})")

    async def search(self, vector: List[float], limit: int = 5) -> List[RetrievedPoint]:
        """
        Return up to ``limit`` points nearest to ``vector``.

        Raises:
            NotInitialized: If called before initialize()
            UpstreamError: On connection or request failure
        """
        if self._client is None:
            raise NotInitialized("Qdrant client not initialized")

        try:
            response = await self._client.query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except (UnexpectedResponse, ResponseHandlingException, OSError) as e:
            logger.error(f"Qdrant search failed: {e}")
            raise UpstreamError(f"Vector search failed: {e}", cause=e)

        return [
            RetrievedPoint(id=point.id, score=point.score, payload=point.payload or {})
            for point in response.points
        ]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
