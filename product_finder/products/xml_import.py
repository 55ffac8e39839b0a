"""Product catalogue import from XML."""

import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from product_finder.exceptions import ErrorCode, ProductImportError
from product_finder.logging_config import get_logger
from product_finder.products.models import Product

logger = get_logger(__name__)

# XML element name -> converter for scalar product fields
FIELD_TYPES: dict[str, Callable[[str], Any]] = {
    "id": int,
    "name": str,
    "sku": str,
    "description": str,
    "brand": str,
    "category": str,
    "price": float,
    "image_url": str,
    "rating": float,
    "stock": int,
}


class ProductXmlImporter:
    """Parses ``<products><product>...</product></products>`` documents.

    Example:
        >>> importer = ProductXmlImporter()
        >>> products = importer.import_from_string(
        ...     "<products><product><name>Lamp</name></product></products>"
        ... )
        >>> products[0].name
        'Lamp'
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def import_from_file(self, source: str | Path) -> list[Product]:
        """Read and parse an XML catalogue file.

        Raises:
            ProductImportError: If the file is missing, unreadable or invalid.
        """
        path = Path(source)

        if not path.is_file():
            raise ProductImportError(
                f"XML file not found: {path}",
                details={"path": str(path)},
            )

        try:
            content = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ProductImportError(
                f"Failed to read XML file: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

        products = self.import_from_string(content)
        logger.info(
            "Imported products",
            extra={"path": str(path), "count": len(products)},
        )
        return products

    def import_from_string(self, content: str) -> list[Product]:
        """Parse XML text into validated products, in document order.

        Raises:
            ProductImportError: If the XML is malformed or a product is invalid.
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise ProductImportError(
                f"Invalid XML format: {e}",
                code=ErrorCode.PRODUCT_PARSE_ERROR,
            ) from e

        return [
            self._parse_product(node, position)
            for position, node in enumerate(root.findall("product"), start=1)
        ]

    def _parse_product(self, node: ET.Element, position: int) -> Product:
        data: dict[str, Any] = {}

        for field, convert in FIELD_TYPES.items():
            child = node.find(field)
            if child is None:
                continue
            text = (child.text or "").strip()
            if not text and convert is not str:
                continue
            try:
                data[field] = convert(text)
            except ValueError as e:
                raise ProductImportError(
                    f"Product #{position}: invalid value for {field}: {text!r}",
                    code=ErrorCode.PRODUCT_INVALID,
                    details={"position": position, "field": field},
                ) from e

        data["specifications"] = {
            spec.get("name", ""): (spec.text or "").strip()
            for spec in node.findall("specifications/specification")
        }
        data["features"] = [
            (feature.text or "").strip() for feature in node.findall("features/feature")
        ]

        try:
            return Product(**data)
        except PydanticValidationError as e:
            problems = ", ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ProductImportError(
                f"Product #{position} validation failed: {problems}",
                code=ErrorCode.PRODUCT_INVALID,
                details={"position": position},
            ) from e
