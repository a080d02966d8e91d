"""Tests for observability module."""

from httpx import AsyncClient
from prometheus_client import REGISTRY

from simsearch.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_completion_request,
    track_embedding_request,
    track_search,
    track_store_operation,
)


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    async def test_metrics_endpoint_returns_prometheus_format(self, client: AsyncClient) -> None:
        """Metrics endpoint returns Prometheus format."""
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert b"# HELP" in response.content

    async def test_requests_are_counted(self, client: AsyncClient) -> None:
        """HTTP requests are recorded under a normalized endpoint."""
        labels = {"method": "GET", "endpoint": "/api/v1/documents", "status_code": "404"}
        before = _sample("http_requests_total", labels)

        await client.get("/api/v1/documents/some-id")

        assert _sample("http_requests_total", labels) == before + 1


class TestEndpointNormalization:
    """Tests for endpoint label normalization."""

    def test_health_paths_collapse(self) -> None:
        """All health endpoints share one label."""
        middleware = MetricsMiddleware(app=None)
        assert middleware._normalize_endpoint("/health/ready") == "/health"

    def test_document_ids_dropped(self) -> None:
        """Document ids do not become label values."""
        middleware = MetricsMiddleware(app=None)
        assert middleware._normalize_endpoint("/api/v1/documents/bali") == "/api/v1/documents"
        assert middleware._normalize_endpoint("/api/v1/search") == "/api/v1/search"


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        assert isinstance(get_metrics(), bytes)

    def test_track_search_success(self) -> None:
        """Successful searches record count, results and top score."""
        labels = {"mode": "weighted", "status": "success"}
        before = _sample("searches_total", labels)

        track_search("weighted", duration=0.02, results_returned=3, top_score=0.8)

        assert _sample("searches_total", labels) == before + 1
        metrics = get_metrics().decode()
        assert "search_results_returned" in metrics
        assert "search_top_score" in metrics

    def test_track_search_failure(self) -> None:
        """Failed searches are counted under the error status."""
        labels = {"mode": "dot_product", "status": "error"}
        before = _sample("searches_total", labels)

        track_search("dot_product", duration=0.01, results_returned=0, top_score=None, success=False)

        assert _sample("searches_total", labels) == before + 1

    def test_track_embedding_request(self) -> None:
        """track_embedding_request records request."""
        labels = {"model": "bge-small", "status": "success"}
        before = _sample("embedding_requests_total", labels)

        track_embedding_request(model="bge-small", duration=0.1)

        assert _sample("embedding_requests_total", labels) == before + 1

    def test_track_store_operation(self) -> None:
        """Store mutations are counted per operation and status."""
        labels = {"operation": "insert", "status": "error"}
        before = _sample("store_operations_total", labels)

        track_store_operation("insert", success=False)

        assert _sample("store_operations_total", labels) == before + 1

    def test_track_completion_request(self) -> None:
        """Completion requests are timed."""
        track_completion_request(model="llama3:8b", duration=1.5)

        assert "completion_request_duration_seconds" in get_metrics().decode()
