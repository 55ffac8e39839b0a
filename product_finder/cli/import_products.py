"""Import a product catalogue from XML into the vector store.

Usage:
    product-finder-import data/products.xml
"""

import argparse
import asyncio
import sys
from pathlib import Path

from product_finder.api.dependencies import (
    close_services,
    get_embedding_service,
    get_vector_store,
)
from product_finder.exceptions import ProductFinderError
from product_finder.logging_config import get_logger, setup_logging
from product_finder.products.indexer import ProductIndexer
from product_finder.products.xml_import import ProductXmlImporter

logger = get_logger(__name__)


async def run_import(
    xml_file: Path,
    importer: ProductXmlImporter | None = None,
    indexer: ProductIndexer | None = None,
) -> bool:
    """Parse ``xml_file``, embed the products and store them.

    Returns:
        True if every product was indexed.
    """
    importer = importer or ProductXmlImporter()
    owns_services = indexer is None
    if indexer is None:
        indexer = ProductIndexer(get_embedding_service(), get_vector_store())

    try:
        products = importer.import_from_file(xml_file)
        print(f"Parsed {len(products)} products from {xml_file}")

        result = await indexer.index(products)
    except ProductFinderError as e:
        logger.error(
            "Import failed",
            extra={"error_code": e.code.value, "error_message": e.message},
        )
        print(f"An error occurred during import: {e.message}", file=sys.stderr)
        return False
    finally:
        if owns_services:
            await close_services()

    if result.collection_created:
        print("Created product collection")
    print(f"Indexed {result.indexed} of {result.products} products")
    return result.indexed == result.products


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Import products from an XML file and index them",
    )
    parser.add_argument("xml_file", type=Path, help="Path to XML file with products")

    args = parser.parse_args(argv)
    setup_logging()

    succeeded = asyncio.run(run_import(args.xml_file))
    sys.exit(0 if succeeded else 1)


if __name__ == "__main__":
    main()
