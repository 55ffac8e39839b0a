"""Product catalogue models."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Product(BaseModel):
    """A catalogue product as imported from XML.

    Attributes:
        id: Catalogue identifier, also used as the vector point id.
        name: Product name (required).
        specifications: Named technical specifications.
        features: Free-text feature list.
    """

    id: int | None = Field(default=None, description="Catalogue identifier")
    name: str = Field(description="Product name")
    sku: str | None = Field(default=None, description="Stock keeping unit")
    description: str | None = Field(default=None, description="Long description")
    brand: str | None = Field(default=None, description="Brand name")
    category: str | None = Field(default=None, description="Category name")
    price: float | None = Field(default=None, description="Unit price")
    specifications: dict[str, str] = Field(default_factory=dict)
    features: list[str] = Field(default_factory=list)
    image_url: str | None = Field(default=None, description="Image URL")
    rating: float | None = Field(default=None, description="Customer rating")
    stock: int | None = Field(default=None, description="Units in stock")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value

    def text_for_embedding(self) -> str:
        """Text that represents this product in the vector space.

        Core fields first, then specifications and features when present.
        """
        text = " ".join(
            part or ""
            for part in (self.name, self.brand, self.category, self.description)
        )

        if self.specifications:
            text += " Specifications: "
            for key, value in self.specifications.items():
                text += f" {key}: {value}"

        if self.features:
            text += " Features: " + ", ".join(self.features)

        return text

    def vector_payload(self) -> dict[str, Any]:
        """Metadata stored next to the product vector."""
        return {
            "title": self.name,
            "type": "product",
            "sku": self.sku,
            "brand": self.brand,
            "category": self.category,
            "price": self.price,
        }
