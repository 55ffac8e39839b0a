"""Vector store module."""

from product_finder.vectorstore.models import SearchResult, VectorRecord
from product_finder.vectorstore.service import QdrantVectorStore, VectorStore

__all__ = [
    "QdrantVectorStore",
    "SearchResult",
    "VectorRecord",
    "VectorStore",
]
