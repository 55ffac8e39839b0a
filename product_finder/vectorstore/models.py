"""Vector store data models."""

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """A vector plus payload to store in the collection.

    Attributes:
        id: Point identifier (unsigned integer or UUID string).
        vector: The embedding vector.
        payload: Metadata stored next to the vector.
    """

    id: int | str = Field(description="Point identifier")
    vector: list[float] = Field(description="Embedding vector")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata payload",
    )


class SearchResult(BaseModel):
    """One hit from a similarity search.

    Attributes:
        id: Point identifier.
        title: Product title from the payload, if stored.
        distance: Cosine distance to the query (0 = identical).
    """

    id: int | str = Field(description="Point identifier")
    title: str | None = Field(default=None, description="Product title")
    distance: float | None = Field(default=None, description="Cosine distance")
