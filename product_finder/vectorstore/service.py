"""Vector store interface and Qdrant implementation."""

import time
from abc import ABC, abstractmethod

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from product_finder.config import QdrantSettings, get_settings
from product_finder.exceptions import ErrorCode, SearchError
from product_finder.logging_config import get_logger
from product_finder.observability.metrics import track_vectorstore_operation
from product_finder.vectorstore.models import SearchResult, VectorRecord

logger = get_logger(__name__)


class VectorStore(ABC):
    """Stores product vectors and answers nearest-neighbour queries.

    All operations act on the single configured product collection.
    """

    @abstractmethod
    async def collection_exists(self) -> bool:
        """Check whether the product collection exists."""
        ...

    @abstractmethod
    async def create_collection(self, dimensions: int | None = None) -> None:
        """Create the product collection.

        Raises:
            SearchError: If it already exists or creation fails.
        """
        ...

    async def ensure_collection(self) -> bool:
        """Create the collection unless it exists.

        Returns:
            True if the collection was created by this call.
        """
        if await self.collection_exists():
            return False
        await self.create_collection()
        return True

    @abstractmethod
    async def upsert(self, records: list[VectorRecord]) -> int:
        """Insert or replace records.

        Returns:
            Number of records written.

        Raises:
            SearchError: If the write fails.
        """
        ...

    @abstractmethod
    async def search(self, vector: list[float], limit: int = 5) -> list[SearchResult]:
        """Return up to ``limit`` nearest products, closest first.

        Raises:
            SearchError: If the query fails.
        """
        ...


class QdrantVectorStore(VectorStore):
    """Qdrant-backed product collection using cosine distance."""

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize Qdrant vector store.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    @property
    def collection_name(self) -> str:
        return self._settings.collection_name

    async def _get_client(self) -> AsyncQdrantClient:
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(url=self._settings.url, api_key=api_key)
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    def _check_dimensions(self, vector: list[float]) -> None:
        if len(vector) != self._settings.dimensions:
            raise SearchError(
                f"Vector has {len(vector)} dimensions, "
                f"collection expects {self._settings.dimensions}",
                code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
                details={
                    "collection": self.collection_name,
                    "expected": self._settings.dimensions,
                    "actual": len(vector),
                },
            )

    async def collection_exists(self) -> bool:
        client = await self._get_client()
        try:
            return await client.collection_exists(self.collection_name)
        except Exception as e:
            raise SearchError(
                f"Failed to check collection: {e}",
                details={"collection": self.collection_name, "error": str(e)},
            ) from e

    async def create_collection(self, dimensions: int | None = None) -> None:
        dimensions = dimensions or self._settings.dimensions
        client = await self._get_client()

        try:
            if await client.collection_exists(self.collection_name):
                raise SearchError(
                    f"Collection already exists: {self.collection_name}",
                    code=ErrorCode.COLLECTION_EXISTS,
                    details={"collection": self.collection_name},
                )

            await client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(size=dimensions, distance=Distance.COSINE),
            )
            logger.info(
                "Created collection",
                extra={"collection": self.collection_name, "dimensions": dimensions},
            )

        except SearchError:
            raise
        except Exception as e:
            raise SearchError(
                f"Failed to create collection: {e}",
                details={"collection": self.collection_name, "error": str(e)},
            ) from e

    async def upsert(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        for record in records:
            self._check_dimensions(record.vector)

        client = await self._get_client()
        start_time = time.perf_counter()

        try:
            points = [
                PointStruct(id=record.id, vector=record.vector, payload=record.payload)
                for record in records
            ]
            await client.upsert(collection_name=self.collection_name, points=points)
        except Exception as e:
            track_vectorstore_operation(
                "upsert", time.perf_counter() - start_time, success=False
            )
            raise SearchError(
                f"Failed to upsert records: {e}",
                details={"collection": self.collection_name, "error": str(e)},
            ) from e

        track_vectorstore_operation("upsert", time.perf_counter() - start_time)
        logger.debug(
            "Upserted records",
            extra={"collection": self.collection_name, "count": len(points)},
        )
        return len(points)

    async def search(self, vector: list[float], limit: int = 5) -> list[SearchResult]:
        self._check_dimensions(vector)

        client = await self._get_client()
        start_time = time.perf_counter()

        try:
            response = await client.query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=limit,
                with_payload=True,
            )
        except Exception as e:
            track_vectorstore_operation(
                "search", time.perf_counter() - start_time, success=False
            )
            raise SearchError(
                f"Failed to search: {e}",
                details={"collection": self.collection_name, "error": str(e)},
            ) from e

        track_vectorstore_operation("search", time.perf_counter() - start_time)

        # Qdrant reports cosine similarity; callers work in distance
        return [
            SearchResult(
                id=point.id,
                title=(point.payload or {}).get("title"),
                distance=1.0 - point.score if point.score is not None else None,
            )
            for point in response.points
        ]
