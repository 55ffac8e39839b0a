"""Tests for recommendation prompt construction."""

import pytest

from product_finder.exceptions import TemplateNotFoundError
from product_finder.llm.models import Role
from product_finder.prompts.provider import InMemoryPromptTemplateProvider
from product_finder.search.prompt_builder import (
    RecommendationPromptBuilder,
    format_products_list,
    format_similarity,
)
from product_finder.vectorstore.models import SearchResult


class TestFormatting:
    """Tests for products list formatting."""

    @pytest.mark.parametrize(
        ("distance", "expected"),
        [(0.2, "0.8"), (0.33, "0.67"), (0.0, "1"), (0.5, "0.5")],
    )
    def test_similarity(self, distance: float, expected: str) -> None:
        """Similarity is 1 - distance without float noise."""
        assert format_similarity(distance) == expected

    def test_products_list(self) -> None:
        """One numbered line per result, each ending in a newline."""
        results = [
            SearchResult(id=1, title="Phone X", distance=0.2),
            SearchResult(id=2, title=None, distance=0.4),
        ]

        assert format_products_list(results) == (
            "1. Phone X (Similarity: 0.8)\n"
            "2. Unknown product (Similarity: 0.6)\n"
        )

    def test_empty_list(self) -> None:
        """No results give an empty string."""
        assert format_products_list([]) == ""


class TestRecommendationPromptBuilder:
    """Tests for RecommendationPromptBuilder."""

    def test_build(self, prompt_provider: InMemoryPromptTemplateProvider) -> None:
        """System and user messages come from the templates."""
        builder = RecommendationPromptBuilder(prompt_provider)

        prompt = builder.build(
            "waterproof smartphone",
            [SearchResult(id=1, title="Phone X", distance=0.2)],
        )

        assert prompt.system.role == Role.SYSTEM
        assert prompt.system.content == "You are a product finder."
        assert prompt.user.role == Role.USER
        assert prompt.user.content == (
            "Query: waterproof smartphone\nProducts:\n1. Phone X (Similarity: 0.8)\n"
        )
        assert prompt.as_messages() == [prompt.system, prompt.user]

    def test_build_is_deterministic(
        self, prompt_provider: InMemoryPromptTemplateProvider
    ) -> None:
        """Identical inputs give byte-identical prompts."""
        builder = RecommendationPromptBuilder(prompt_provider)
        results = [
            SearchResult(id=1, title="Phone X", distance=0.2),
            SearchResult(id=7, title="Phone Z", distance=0.45),
        ]

        first = builder.build("phone", results)
        second = builder.build("phone", results)

        assert first.model_dump_json() == second.model_dump_json()

    def test_build_with_image(
        self, prompt_provider: InMemoryPromptTemplateProvider
    ) -> None:
        """Image prompts use the image template and its parameters."""
        builder = RecommendationPromptBuilder(prompt_provider)

        prompt = builder.build_with_image(
            "like this",
            "A black phone",
            [SearchResult(id=1, title="Phone X", distance=0.2)],
        )

        assert prompt.user.content == (
            "Query: like this\nImage: A black phone\n"
            "Products:\n1. Phone X (Similarity: 0.8)\n"
        )

    def test_missing_template(self) -> None:
        """Missing templates surface as TemplateNotFoundError."""
        builder = RecommendationPromptBuilder(
            InMemoryPromptTemplateProvider({"product_finder": {"system_prompt": "S"}})
        )

        with pytest.raises(TemplateNotFoundError, match="user_message_template"):
            builder.build("phone", [SearchResult(id=1, title="X", distance=0.1)])
