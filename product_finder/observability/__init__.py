"""Observability module for metrics and monitoring."""

from product_finder.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_embedding_request,
    track_llm_request,
    track_relevance_filter,
    track_search_request,
    track_vectorstore_operation,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_embedding_request",
    "track_llm_request",
    "track_relevance_filter",
    "track_search_request",
    "track_vectorstore_operation",
]
