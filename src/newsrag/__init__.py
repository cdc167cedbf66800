"""News RAG - retrieval-augmented question answering over news articles."""

__version__ = "1.0.0"
