"""Product catalogue: model, XML import and indexing."""

from product_finder.products.indexer import IndexingResult, ProductIndexer
from product_finder.products.models import Product
from product_finder.products.xml_import import ProductXmlImporter

__all__ = [
    "IndexingResult",
    "Product",
    "ProductIndexer",
    "ProductXmlImporter",
]
