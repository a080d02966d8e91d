"""Prometheus metrics for the search engine.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Search latency, result counts and top scores per mode
- Embedding request latency
- Document store mutations
- Completion requests made by the RAG layer
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from simsearch.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Search Metrics
SEARCH_DURATION = Histogram(
    "search_duration_seconds",
    "Search duration in seconds, embedding included",
    ["mode", "status"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

SEARCH_TOTAL = Counter(
    "searches_total",
    "Total searches",
    ["mode", "status"],
)

SEARCH_RESULTS_RETURNED = Histogram(
    "search_results_returned",
    "Number of results returned per search",
    ["mode"],
    buckets=[0, 1, 2, 3, 5, 10, 20, 50],
)

SEARCH_TOP_SCORE = Histogram(
    "search_top_score",
    "Top result score per search",
    ["mode"],
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0, 1.5, 2.0],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

# Store Metrics
STORE_OPERATIONS_TOTAL = Counter(
    "store_operations_total",
    "Document store mutations",
    ["operation", "status"],
)

# Completion Metrics
COMPLETION_REQUEST_DURATION = Histogram(
    "completion_request_duration_seconds",
    "Completion request duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware."""
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        # Document ids would explode cardinality
        if path.startswith("/api/v1/"):
            parts = path.split("/")
            if len(parts) >= 4:
                return f"/api/v1/{parts[3]}"
        return path


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_search(
    mode: str,
    duration: float,
    results_returned: int,
    top_score: float | None,
    success: bool = True,
) -> None:
    """Track a completed or failed search.

    Args:
        mode: Scoring mode used.
        duration: Search duration in seconds.
        results_returned: Number of results returned.
        top_score: Highest score, None when nothing was returned.
        success: Whether the search succeeded.
    """
    status = "success" if success else "error"

    SEARCH_DURATION.labels(mode=mode, status=status).observe(duration)
    SEARCH_TOTAL.labels(mode=mode, status=status).inc()

    if success:
        SEARCH_RESULTS_RETURNED.labels(mode=mode).observe(results_returned)
        if top_score is not None:
            SEARCH_TOP_SCORE.labels(mode=mode).observe(top_score)


def track_embedding_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_store_operation(operation: str, success: bool = True) -> None:
    """Count a document store mutation.

    Args:
        operation: insert, remove or clear.
        success: Whether the mutation was applied.
    """
    status = "success" if success else "error"
    STORE_OPERATIONS_TOTAL.labels(operation=operation, status=status).inc()


def track_completion_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track completion request metrics.

    Args:
        model: Completion model name.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"
    COMPLETION_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
