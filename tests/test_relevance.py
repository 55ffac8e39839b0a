"""Tests for relevance filtering."""

import inspect

import pytest

from product_finder.search.orchestrator import ProductSearchOrchestrator
from product_finder.search.relevance import (
    RELEVANCE_THRESHOLD,
    RelevanceFilter,
    filter_relevant,
)
from product_finder.vectorstore.models import SearchResult


def result(result_id: int, distance: float | None) -> SearchResult:
    return SearchResult(id=result_id, title=f"Product {result_id}", distance=distance)


class TestFilterRelevant:
    """Tests for filter_relevant."""

    def test_threshold_value(self) -> None:
        """Threshold is a cosine distance of 0.5."""
        assert RELEVANCE_THRESHOLD == 0.5

    def test_keeps_exactly_the_close_results(self) -> None:
        """Only results with distance <= 0.5 survive."""
        results = [result(1, 0.2), result(2, 0.6), result(3, 0.5), result(4, 0.51)]
        assert [r.id for r in filter_relevant(results)] == [1, 3]

    def test_preserves_input_order(self) -> None:
        """Results are never re-sorted."""
        results = [result(1, 0.4), result(2, 0.1), result(3, 0.3)]
        assert [r.id for r in filter_relevant(results)] == [1, 2, 3]

    def test_drops_results_without_distance(self) -> None:
        """Entries without a distance are dropped."""
        results = [result(1, None), result(2, 0.0)]
        assert [r.id for r in filter_relevant(results)] == [2]

    def test_empty_input(self) -> None:
        """Empty input gives empty output."""
        assert filter_relevant([]) == []

    def test_all_irrelevant(self) -> None:
        """Nothing survives when everything is far away."""
        assert filter_relevant([result(1, 0.9), result(2, 1.7)]) == []


class TestRelevanceFilter:
    """Tests for RelevanceFilter."""

    def test_default_threshold(self) -> None:
        """Filter matches filter_relevant at the fixed threshold."""
        results = [result(1, 0.2), result(2, 0.6)]
        assert RelevanceFilter().filter(results) == filter_relevant(results)

    def test_threshold_is_fixed(self) -> None:
        """The threshold cannot be set per instance or per orchestrator."""
        assert RelevanceFilter.threshold == RELEVANCE_THRESHOLD

        with pytest.raises(TypeError):
            RelevanceFilter(threshold=0.3)  # type: ignore[call-arg]

        params = inspect.signature(ProductSearchOrchestrator).parameters
        assert "relevance_filter" not in params
