"""Embeds products and writes them to the vector store."""

import uuid

from pydantic import BaseModel, Field

from product_finder.embeddings.service import EmbeddingService
from product_finder.logging_config import get_logger
from product_finder.products.models import Product
from product_finder.vectorstore.models import VectorRecord
from product_finder.vectorstore.service import VectorStore

logger = get_logger(__name__)


class IndexingResult(BaseModel):
    """Summary of one indexing run."""

    products: int = Field(description="Products received")
    indexed: int = Field(description="Records written to the vector store")
    collection_created: bool = Field(description="Whether the collection was created")


class ProductIndexer:
    """Makes products searchable: embed, then upsert."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
    ) -> None:
        self._embedding_service = embedding_service
        self._vector_store = vector_store

    @staticmethod
    def point_id(product: Product) -> int | str:
        """Vector point id: the catalogue id, else a UUID derived from sku or name."""
        if product.id is not None and product.id >= 0:
            return product.id
        return str(uuid.uuid5(uuid.NAMESPACE_URL, product.sku or product.name))

    async def index(self, products: list[Product]) -> IndexingResult:
        """Embed ``products`` and upsert them into the product collection.

        Raises:
            EmbeddingError: If embedding fails.
            SearchError: If the collection cannot be prepared or written.
        """
        created = await self._vector_store.ensure_collection()
        if not products:
            return IndexingResult(products=0, indexed=0, collection_created=created)

        embeddings = await self._embedding_service.embed_batch(
            [product.text_for_embedding() for product in products]
        )

        records = [
            VectorRecord(
                id=self.point_id(product),
                vector=embedding.embedding,
                payload=product.vector_payload(),
            )
            for product, embedding in zip(products, embeddings, strict=True)
        ]
        indexed = await self._vector_store.upsert(records)

        logger.info(
            "Indexed products",
            extra={"products": len(products), "indexed": indexed},
        )
        return IndexingResult(
            products=len(products),
            indexed=indexed,
            collection_created=created,
        )
