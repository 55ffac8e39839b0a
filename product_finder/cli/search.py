"""Search the product catalogue from the command line.

Usage:
    product-finder-search "waterproof smartphone" --timeout 30
    product-finder-search "desk lamp" --plain
"""

import argparse
import asyncio
import sys

from product_finder.api.dependencies import build_orchestrator, close_services
from product_finder.exceptions import ErrorCode
from product_finder.logging_config import get_logger, setup_logging
from product_finder.search.models import SearchResponse
from product_finder.search.orchestrator import ProductSearchOrchestrator

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def format_products_table(response: SearchResponse) -> str:
    """Render matched products as a fixed-width table."""
    rows = [
        (
            str(position),
            str(product.id),
            product.title or "Unknown product",
            f"{product.distance:.4f}" if product.distance is not None else "-",
        )
        for position, product in enumerate(response.products, start=1)
    ]
    headers = ("#", "ID", "Product Name", "Distance")
    widths = [
        max(len(headers[i]), *(len(row[i]) for row in rows)) if rows else len(headers[i])
        for i in range(len(headers))
    ]

    def line(cells: tuple[str, ...]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths))

    separator = "  ".join("-" * width for width in widths)
    return "\n".join([line(headers), separator, *(line(row) for row in rows)])


def print_response(query: str, response: SearchResponse) -> None:
    """Print a search response for a terminal reader."""
    print(f"Query: {query}")

    if response.message:
        print(response.message)

    if response.products:
        print()
        print(format_products_table(response))

    if response.response:
        print()
        print("Recommendation:")
        print(response.response)


async def run_search(
    query: str,
    timeout: float | None = None,
    plain: bool = False,
    orchestrator: ProductSearchOrchestrator | None = None,
) -> int:
    """Run one search and print the result.

    Args:
        query: Search text.
        timeout: Request deadline in seconds.
        plain: List products without asking for a recommendation.
        orchestrator: Pre-built orchestrator (built from settings if not provided).

    Returns:
        Process exit code: 0 on success, 2 for invalid input, 1 on failure.
    """
    owns_services = orchestrator is None
    if orchestrator is None:
        orchestrator = build_orchestrator()

    try:
        if plain:
            response = await orchestrator.search(query, timeout=timeout)
        else:
            response = await orchestrator.handle(query, timeout=timeout)
    finally:
        if owns_services:
            await close_services()

    print_response(query, response)
    if response.success:
        return EXIT_SUCCESS
    if response.error_code == ErrorCode.VALIDATION_ERROR:
        return EXIT_INVALID
    return EXIT_FAILURE


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Search products and get a recommendation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("query", help="Search query")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Deadline for the whole request in seconds",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Only list matching products, skip the recommendation",
    )

    args = parser.parse_args(argv)
    setup_logging()

    exit_code = asyncio.run(
        run_search(args.query, timeout=args.timeout, plain=args.plain)
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
