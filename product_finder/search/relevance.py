"""Distance-threshold relevance filtering."""

from collections.abc import Iterable

from product_finder.vectorstore.models import SearchResult

# Cosine distance cut-off; results farther than this are not shown
RELEVANCE_THRESHOLD = 0.5


def filter_relevant(
    results: Iterable[SearchResult],
    threshold: float = RELEVANCE_THRESHOLD,
) -> list[SearchResult]:
    """Keep results with a distance at or below ``threshold``.

    Order is preserved; results without a distance are dropped.
    """
    return [
        result
        for result in results
        if result.distance is not None and result.distance <= threshold
    ]


class RelevanceFilter:
    """Applies the fixed :data:`RELEVANCE_THRESHOLD`."""

    threshold = RELEVANCE_THRESHOLD

    def filter(self, results: Iterable[SearchResult]) -> list[SearchResult]:
        return filter_relevant(results)
