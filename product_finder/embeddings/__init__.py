"""Embedding service module."""

from product_finder.embeddings.models import EmbeddingResult
from product_finder.embeddings.service import EmbeddingService, HTTPEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "HTTPEmbeddingService",
]
