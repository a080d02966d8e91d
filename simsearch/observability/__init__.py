"""Observability module for metrics and monitoring."""

from simsearch.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_completion_request,
    track_embedding_request,
    track_search,
    track_store_operation,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_completion_request",
    "track_embedding_request",
    "track_search",
    "track_store_operation",
]
