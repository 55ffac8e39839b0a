"""Search pipeline data models."""

from pydantic import BaseModel, Field

from product_finder.exceptions import ErrorCode
from product_finder.llm.models import Message, Role
from product_finder.vectorstore.models import SearchResult


class ProductMatch(BaseModel):
    """A product returned to the caller.

    Attributes:
        id: Product identifier.
        title: Product title, if known.
        distance: Cosine distance to the query.
    """

    id: int | str = Field(description="Product identifier")
    title: str | None = Field(default=None, description="Product title")
    distance: float | None = Field(default=None, description="Cosine distance")

    @classmethod
    def from_result(cls, result: SearchResult) -> "ProductMatch":
        return cls(id=result.id, title=result.title, distance=result.distance)


class SearchResponse(BaseModel):
    """Outcome of one search request.

    ``error_code`` is set on failures so adapters can choose a status code;
    it is never serialized.
    """

    success: bool = Field(description="Whether the request succeeded")
    query: str | None = Field(default=None, description="Echoed query")
    message: str | None = Field(default=None, description="Status or error message")
    response: str | None = Field(default=None, description="Recommendation text")
    products: list[ProductMatch] = Field(default_factory=list)
    error_code: ErrorCode | None = Field(default=None, exclude=True)


class ImageSearchResponse(SearchResponse):
    """Search response for a query that came with an image."""

    image_description: str | None = Field(
        default=None, description="Description generated for the uploaded image"
    )


class RecommendationPrompt(BaseModel):
    """System and user messages sent to the chat model."""

    system: Message
    user: Message

    @classmethod
    def from_text(cls, system: str, user: str) -> "RecommendationPrompt":
        return cls(
            system=Message(role=Role.SYSTEM, content=system),
            user=Message(role=Role.USER, content=user),
        )

    def as_messages(self) -> list[Message]:
        return [self.system, self.user]
