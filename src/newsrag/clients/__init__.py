"""Provider clients - embeddings, vector search and answer generation."""

from newsrag.clients.embedding import EmbeddingClient
from newsrag.clients.vector_index import VectorIndexClient
from newsrag.clients.generation import GenerationClient, FALLBACK_ANSWER, build_prompt

__all__ = [
    "EmbeddingClient",
    "VectorIndexClient",
    "GenerationClient",
    "FALLBACK_ANSWER",
    "build_prompt",
]
