"""Search and recommendation pipeline."""

from product_finder.search.models import (
    ImageSearchResponse,
    ProductMatch,
    RecommendationPrompt,
    SearchResponse,
)
from product_finder.search.orchestrator import (
    CHAT_RESULT_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    ProductSearchOrchestrator,
)
from product_finder.search.outcome import StepOutcome
from product_finder.search.prompt_builder import RecommendationPromptBuilder
from product_finder.search.relevance import (
    RELEVANCE_THRESHOLD,
    RelevanceFilter,
    filter_relevant,
)

__all__ = [
    "CHAT_RESULT_LIMIT",
    "DEFAULT_SEARCH_LIMIT",
    "RELEVANCE_THRESHOLD",
    "ImageSearchResponse",
    "ProductMatch",
    "ProductSearchOrchestrator",
    "RecommendationPrompt",
    "RecommendationPromptBuilder",
    "RelevanceFilter",
    "SearchResponse",
    "StepOutcome",
    "filter_relevant",
]
