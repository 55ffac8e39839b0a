"""Tests for observability module."""

from httpx import AsyncClient
from prometheus_client import REGISTRY

from product_finder.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_embedding_request,
    track_llm_request,
    track_relevance_filter,
    track_search_request,
    track_vectorstore_operation,
)


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    async def test_metrics_endpoint_returns_prometheus_format(
        self, client: AsyncClient
    ) -> None:
        """Metrics endpoint returns Prometheus format."""
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert b"# HELP" in response.content


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        assert isinstance(get_metrics(), bytes)

    def test_track_search_request(self) -> None:
        """Search runs are counted per path and outcome."""
        labels = {"path": "chat", "outcome": "no_results"}
        before = sample("product_search_requests_total", labels)

        track_search_request("chat", "no_results", 0.3)

        assert sample("product_search_requests_total", labels) == before + 1
        assert "product_search_duration_seconds" in get_metrics().decode()

    def test_track_relevance_filter(self) -> None:
        """Kept candidate counts are observed."""
        before = sample("product_search_relevant_results_count")

        track_relevance_filter(2)

        assert sample("product_search_relevant_results_count") == before + 1

    def test_track_llm_request_success(self) -> None:
        """Successful requests record tokens."""
        labels = {"model": "test-model", "type": "completion"}
        before = sample("llm_tokens_total", labels)

        track_llm_request(
            model="test-model",
            duration=1.5,
            prompt_tokens=100,
            completion_tokens=50,
            success=True,
        )

        assert sample("llm_tokens_total", labels) == before + 50

    def test_track_llm_request_failure(self) -> None:
        """Failed requests are counted under the error status."""
        labels = {"model": "test-model", "status": "error"}
        before = sample("llm_requests_total", labels)

        track_llm_request(
            model="test-model",
            duration=0.5,
            prompt_tokens=0,
            completion_tokens=0,
            success=False,
        )

        assert sample("llm_requests_total", labels) == before + 1

    def test_track_embedding_request(self) -> None:
        """track_embedding_request records request."""
        track_embedding_request(
            model="text-embedding-3-small",
            duration=0.1,
            batch_size=10,
            success=True,
        )

        metrics = get_metrics().decode()
        assert "embedding_request_duration_seconds" in metrics
        assert "embedding_batch_size" in metrics

    def test_track_vectorstore_operation(self) -> None:
        """Vector store calls are timed per operation."""
        labels = {"operation": "search", "status": "error"}
        before = sample("vectorstore_operation_duration_seconds_count", labels)

        track_vectorstore_operation("search", 0.02, success=False)

        assert (
            sample("vectorstore_operation_duration_seconds_count", labels)
            == before + 1
        )


class TestMetricsMiddleware:
    """Tests for MetricsMiddleware."""

    async def test_middleware_records_request_metrics(
        self, client: AsyncClient
    ) -> None:
        """Middleware records HTTP request metrics."""
        labels = {"method": "GET", "endpoint": "/health", "status_code": "200"}
        before = sample("http_requests_total", labels)

        await client.get("/health")
        await client.get("/health/live")

        assert sample("http_requests_total", labels) == before + 2

    def test_normalizes_product_paths(self) -> None:
        """Product routes keep their first segment only."""
        middleware = MetricsMiddleware(app=None)  # type: ignore[arg-type]

        assert middleware._normalize_endpoint("/health/ready") == "/health"
        assert (
            middleware._normalize_endpoint("/api/products/chat_with_image")
            == "/api/products/chat_with_image"
        )
        assert middleware._normalize_endpoint("/docs") == "/docs"
