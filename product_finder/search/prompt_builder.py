"""Builds the recommendation prompt from filtered search results."""

from collections.abc import Sequence

from product_finder.prompts.provider import PromptTemplateProvider
from product_finder.search.models import RecommendationPrompt
from product_finder.vectorstore.models import SearchResult

PROMPT_SECTION = "product_finder"
UNKNOWN_TITLE = "Unknown product"


def format_similarity(distance: float) -> str:
    """Render ``1 - distance`` with up to 14 significant digits (0.8, 0.67, 1)."""
    return f"{1 - distance:.14g}"


def format_products_list(results: Sequence[SearchResult]) -> str:
    """One ``"<n>. <title> (Similarity: <s>)"`` line per result, 1-indexed."""
    lines = []
    for position, result in enumerate(results, start=1):
        title = result.title or UNKNOWN_TITLE
        similarity = format_similarity(result.distance or 0.0)
        lines.append(f"{position}. {title} (Similarity: {similarity})\n")
    return "".join(lines)


class RecommendationPromptBuilder:
    """Renders system and user messages from the prompt templates.

    Output depends only on the inputs and the template content.
    """

    def __init__(self, prompts: PromptTemplateProvider) -> None:
        self._prompts = prompts

    def build(
        self,
        query: str,
        results: Sequence[SearchResult],
    ) -> RecommendationPrompt:
        """Prompt for a text query.

        Raises:
            TemplateNotFoundError: If a template is missing.
        """
        system = self._prompts.get(PROMPT_SECTION, "system_prompt")
        user = self._prompts.get(
            PROMPT_SECTION,
            "user_message_template",
            {"query": query, "products_list": format_products_list(results)},
        )
        return RecommendationPrompt.from_text(system, user)

    def build_with_image(
        self,
        query: str,
        image_description: str,
        results: Sequence[SearchResult],
    ) -> RecommendationPrompt:
        """Prompt for a query accompanied by an image description.

        Raises:
            TemplateNotFoundError: If a template is missing.
        """
        system = self._prompts.get(PROMPT_SECTION, "system_prompt")
        user = self._prompts.get(
            PROMPT_SECTION,
            "user_message_template_with_image",
            {
                "user_query": query,
                "image_description": image_description,
                "products_list": format_products_list(results),
            },
        )
        return RecommendationPrompt.from_text(system, user)
