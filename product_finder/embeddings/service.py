"""Embedding service interface and the OpenAI-compatible HTTP implementation."""

import time
from abc import ABC, abstractmethod

import httpx

from product_finder.config import EmbeddingSettings, get_settings
from product_finder.embeddings.models import EmbeddingResult
from product_finder.exceptions import EmbeddingError, ErrorCode
from product_finder.logging_config import get_logger
from product_finder.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Turns text into vectors."""

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Embed a single text.

        Raises:
            EmbeddingError: If the service fails or returns no vector.
        """
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed several texts, preserving order.

        Raises:
            EmbeddingError: If the service fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Name of the embedding model."""
        ...


class HTTPEmbeddingService(EmbeddingService):
    """Embedding client for OpenAI-style ``/embeddings`` endpoints."""

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the embedding client.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        api_key = self._settings.api_key.get_secret_value()
        if api_key and api_key != "not-required":
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        return self._settings.model

    async def embed(self, text: str) -> EmbeddingResult:
        """Embed a single text.

        Raises:
            EmbeddingError: If the request fails or the response holds no vector.
        """
        results = await self.embed_batch([text])
        if not results:
            raise EmbeddingError(
                "Embedding service returned no vector",
                details={"model": self._settings.model},
            )
        return results[0]

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed texts in batches of ``settings.batch_size``.

        Raises:
            EmbeddingError: If any batch request fails.
        """
        if not texts:
            return []

        client = await self._get_client()
        url = f"{self._settings.base_url.rstrip('/')}/embeddings"
        batch_size = self._settings.batch_size

        all_results: list[EmbeddingResult] = []
        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            all_results.extend(await self._request_batch(client, url, batch))

        return all_results

    async def _request_batch(
        self,
        client: httpx.AsyncClient,
        url: str,
        texts: list[str],
    ) -> list[EmbeddingResult]:
        payload = {"input": texts, "model": self._settings.model}
        start_time = time.perf_counter()

        try:
            response = await client.post(url, json=payload, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            track_embedding_request(
                self._settings.model,
                time.perf_counter() - start_time,
                len(texts),
                success=False,
            )
            logger.error(
                "Embedding request failed",
                extra={"url": url, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            track_embedding_request(
                self._settings.model,
                time.perf_counter() - start_time,
                len(texts),
                success=False,
            )
            logger.error("Embedding request error", extra={"url": url, "error": str(e)})
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"url": url},
            ) from e

        try:
            data = response.json()
            items = sorted(data["data"], key=lambda item: item.get("index", 0))
            results = [
                EmbeddingResult(
                    text=texts[i],
                    embedding=item["embedding"],
                    model=self._settings.model,
                    dimensions=len(item["embedding"]),
                )
                for i, item in enumerate(items)
            ]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        track_embedding_request(
            self._settings.model,
            time.perf_counter() - start_time,
            len(texts),
        )
        return results
