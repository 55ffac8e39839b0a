"""End-to-end product search and recommendation.

Flow: embed query -> vector search -> relevance filter -> build prompt
-> chat completion -> response. Every failure becomes a response; nothing
raises out of the public entry points except task cancellation.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from product_finder.embeddings.service import EmbeddingService
from product_finder.exceptions import (
    CompletionError,
    ConfigurationError,
    EmbeddingError,
    ErrorCode,
    ImageDescriptionError,
    ProductFinderError,
    SearchError,
    TemplateNotFoundError,
)
from product_finder.llm.client import ChatCompletionClient
from product_finder.llm.vision import ImageDescriptionService
from product_finder.logging_config import get_logger
from product_finder.observability.metrics import (
    track_relevance_filter,
    track_search_request,
)
from product_finder.prompts.provider import PromptTemplateProvider
from product_finder.search.models import (
    ImageSearchResponse,
    ProductMatch,
    RecommendationPrompt,
    SearchResponse,
)
from product_finder.search.outcome import StepOutcome
from product_finder.search.prompt_builder import (
    PROMPT_SECTION,
    RecommendationPromptBuilder,
)
from product_finder.search.relevance import RelevanceFilter
from product_finder.vectorstore.models import SearchResult
from product_finder.vectorstore.service import VectorStore

logger = get_logger(__name__)

T = TypeVar("T")

CHAT_RESULT_LIMIT = 3
DEFAULT_SEARCH_LIMIT = 5

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

MESSAGE_REQUIRED = "Message parameter is required"
QUERY_REQUIRED = "Query parameter is required"
IMAGE_REQUIRED = "Image file is required"
INVALID_IMAGE_TYPE = "Invalid image type. Allowed types: JPEG, PNG, GIF, WebP."
NO_PRODUCTS_FOUND = "No products found matching the query"
NO_RELEVANT_PRODUCTS = "No products found with sufficient relevance to the query"
ERROR_PREFIX = "An error occurred during search: "
TIMEOUT_CAUSE = "Request timed out"


class ProductSearchOrchestrator:
    """Answers product queries with matching products and a recommendation.

    Collaborators are injected once and shared across requests; the
    orchestrator itself holds no per-request state.

    Example:
        >>> orchestrator = ProductSearchOrchestrator(
        ...     embedding_service, vector_store, llm_client, prompts
        ... )
        >>> response = await orchestrator.handle("waterproof smartphone")
        >>> response.products[0].title
        'Phone X'
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        llm_client: ChatCompletionClient,
        prompts: PromptTemplateProvider,
        image_describer: ImageDescriptionService | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            embedding_service: Turns the query into a vector.
            vector_store: Nearest-neighbour product search.
            llm_client: Writes the recommendation.
            prompts: Prompt template provider.
            image_describer: Describes uploaded images (image queries only).
        """
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._llm_client = llm_client
        self._prompts = prompts
        self._image_describer = image_describer
        self._relevance_filter = RelevanceFilter()
        self._prompt_builder = RecommendationPromptBuilder(prompts)

    async def handle(
        self,
        query: str | None,
        timeout: float | None = None,
    ) -> SearchResponse:
        """Find relevant products for ``query`` and recommend among them.

        Args:
            query: Free-text user query.
            timeout: Seconds allowed for the whole request (None for no limit).

        Returns:
            SearchResponse; ``success`` is False on invalid input or failure.
        """
        start_time = time.perf_counter()
        response = await self._recommend(query, timeout)
        self._track("chat", start_time, response)
        return response

    async def search(
        self,
        query: str | None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        timeout: float | None = None,
    ) -> SearchResponse:
        """List relevant products for ``query`` without a recommendation."""
        start_time = time.perf_counter()
        response = await self._list_products(query, limit, timeout)
        self._track("search", start_time, response)
        return response

    async def handle_with_image(
        self,
        query: str | None,
        image: bytes | None,
        mime_type: str | None,
        timeout: float | None = None,
    ) -> ImageSearchResponse:
        """Recommend products for a query combined with an uploaded image.

        The image is described by a vision model and the description is
        appended to the query text before searching.
        """
        start_time = time.perf_counter()
        response = await self._recommend_with_image(query, image, mime_type, timeout)
        self._track("image", start_time, response)
        return response

    async def _recommend(self, query: str | None, timeout: float | None) -> SearchResponse:
        if not query or not query.strip():
            return self._invalid(MESSAGE_REQUIRED)

        deadline = self._deadline(timeout)

        retrieved = await self._retrieve(query, CHAT_RESULT_LIMIT, deadline)
        if retrieved.error is not None:
            return self._failure(query, retrieved.error)

        relevant = self._filter(retrieved.value or [])
        if not relevant:
            return self._no_results(query)

        prompt = self._render(lambda: self._prompt_builder.build(query, relevant))
        if prompt.error is not None:
            return self._failure(query, prompt.error)

        completion = await self._complete(prompt.value, deadline)
        if completion.error is not None:
            return self._failure(query, completion.error)

        return SearchResponse(
            success=True,
            query=query,
            response=completion.value,
            products=[ProductMatch.from_result(result) for result in relevant],
        )

    async def _list_products(
        self,
        query: str | None,
        limit: int,
        timeout: float | None,
    ) -> SearchResponse:
        if not query or not query.strip():
            return self._invalid(QUERY_REQUIRED)

        deadline = self._deadline(timeout)

        retrieved = await self._retrieve(query, limit, deadline)
        if retrieved.error is not None:
            return self._failure(query, retrieved.error)

        results = retrieved.value or []
        if not results:
            return SearchResponse(success=True, query=query, message=NO_PRODUCTS_FOUND)

        relevant = self._filter(results)
        if not relevant:
            return SearchResponse(
                success=True, query=query, message=NO_RELEVANT_PRODUCTS
            )

        return SearchResponse(
            success=True,
            query=query,
            products=[ProductMatch.from_result(result) for result in relevant],
        )

    async def _recommend_with_image(
        self,
        query: str | None,
        image: bytes | None,
        mime_type: str | None,
        timeout: float | None,
    ) -> ImageSearchResponse:
        query = query or ""

        if not image:
            return self._invalid(IMAGE_REQUIRED, ImageSearchResponse)
        if mime_type not in ALLOWED_IMAGE_TYPES:
            return self._invalid(INVALID_IMAGE_TYPE, ImageSearchResponse)

        describer = self._image_describer
        if describer is None:
            return self._failure(
                query,
                ConfigurationError("Image description service is not configured"),
                ImageSearchResponse,
            )

        deadline = self._deadline(timeout)

        described = await self._run_step(
            "image_description",
            lambda: describer.describe(image, mime_type),
            deadline,
            ImageDescriptionError,
        )
        if described.error is not None:
            return self._failure(query, described.error, ImageSearchResponse)

        description = described.value or ""
        search_text = (
            f"{query}\n\nImage Content: {description}" if query.strip() else description
        )

        retrieved = await self._retrieve(search_text, CHAT_RESULT_LIMIT, deadline)
        if retrieved.error is not None:
            return self._failure(
                query, retrieved.error, ImageSearchResponse, image_description=description
            )

        relevant = self._filter(retrieved.value or [])
        if not relevant:
            return self._no_results(
                query, ImageSearchResponse, image_description=description
            )

        prompt = self._render(
            lambda: self._prompt_builder.build_with_image(query, description, relevant)
        )
        if prompt.error is not None:
            return self._failure(
                query, prompt.error, ImageSearchResponse, image_description=description
            )

        completion = await self._complete(prompt.value, deadline)
        if completion.error is not None:
            return self._failure(
                query,
                completion.error,
                ImageSearchResponse,
                image_description=description,
            )

        return ImageSearchResponse(
            success=True,
            query=query,
            response=completion.value,
            products=[ProductMatch.from_result(result) for result in relevant],
            image_description=description,
        )

    async def _retrieve(
        self,
        text: str,
        limit: int,
        deadline: float | None,
    ) -> StepOutcome[list[SearchResult]]:
        """Embed ``text`` and fetch its nearest products."""
        embedded = await self._run_step(
            "embedding",
            lambda: self._embedding_service.embed(text),
            deadline,
            EmbeddingError,
        )
        if embedded.error is not None or embedded.value is None:
            return StepOutcome.failure(
                embedded.error or EmbeddingError("Embedding service returned no vector")
            )

        vector = embedded.value.embedding
        return await self._run_step(
            "vector_search",
            lambda: self._vector_store.search(vector, limit=limit),
            deadline,
            SearchError,
        )

    async def _complete(
        self,
        prompt: RecommendationPrompt | None,
        deadline: float | None,
    ) -> StepOutcome[str]:
        if prompt is None:
            return StepOutcome.failure(CompletionError("No prompt to complete"))
        messages = prompt.as_messages()
        return await self._run_step(
            "completion",
            lambda: self._llm_client.complete(messages),
            deadline,
            CompletionError,
        )

    async def _run_step(
        self,
        stage: str,
        call: Callable[[], Awaitable[T]],
        deadline: float | None,
        error_type: type[ProductFinderError],
    ) -> StepOutcome[T]:
        """Await one collaborator call under the request deadline.

        Errors that are not ProductFinderError are wrapped in ``error_type``.
        Cancellation propagates.
        """
        timeout_cm = asyncio.timeout_at(deadline)
        try:
            async with timeout_cm:
                value = await call()
        except ProductFinderError as e:
            return StepOutcome.failure(e)
        except TimeoutError as e:
            if timeout_cm.expired():
                logger.warning("Request deadline exceeded", extra={"stage": stage})
                return StepOutcome.failure(
                    ProductFinderError(
                        TIMEOUT_CAUSE,
                        code=ErrorCode.REQUEST_TIMEOUT,
                        details={"stage": stage},
                    )
                )
            logger.exception("Unexpected timeout", extra={"stage": stage})
            return StepOutcome.failure(
                error_type(str(e) or TIMEOUT_CAUSE, details={"stage": stage})
            )
        except Exception as e:
            logger.exception("Unexpected collaborator error", extra={"stage": stage})
            return StepOutcome.failure(
                error_type(str(e) or type(e).__name__, details={"stage": stage})
            )
        return StepOutcome.success(value)

    def _render(self, render: Callable[[], T]) -> StepOutcome[T]:
        try:
            return StepOutcome.success(render())
        except ProductFinderError as e:
            return StepOutcome.failure(e)
        except Exception as e:
            logger.exception("Prompt rendering failed")
            return StepOutcome.failure(
                TemplateNotFoundError(
                    f"Failed to render prompt: {e}",
                    code=ErrorCode.TEMPLATE_STORE_ERROR,
                )
            )

    def _filter(self, results: list[SearchResult]) -> list[SearchResult]:
        relevant = self._relevance_filter.filter(results)
        track_relevance_filter(len(relevant))
        return relevant

    @staticmethod
    def _deadline(timeout: float | None) -> float | None:
        if timeout is None:
            return None
        return asyncio.get_running_loop().time() + timeout

    @staticmethod
    def _invalid(
        message: str,
        response_type: type[SearchResponse] = SearchResponse,
    ) -> Any:
        return response_type(
            success=False,
            query=None,
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
        )

    def _no_results(
        self,
        query: str,
        response_type: type[SearchResponse] = SearchResponse,
        **fields: Any,
    ) -> Any:
        rendered = self._render(
            lambda: self._prompts.get(PROMPT_SECTION, "no_results_message")
        )
        if rendered.error is not None:
            return self._failure(query, rendered.error, response_type, **fields)
        return response_type(success=True, query=query, response=rendered.value, **fields)

    @staticmethod
    def _failure(
        query: str,
        error: ProductFinderError,
        response_type: type[SearchResponse] = SearchResponse,
        **fields: Any,
    ) -> Any:
        logger.warning(
            "Search request failed",
            extra={"error_code": error.code.value, "error_message": error.message},
        )
        return response_type(
            success=False,
            query=query,
            message=f"{ERROR_PREFIX}{error.message}",
            error_code=error.code,
            **fields,
        )

    @staticmethod
    def _track(path: str, start_time: float, response: SearchResponse) -> None:
        if response.error_code == ErrorCode.VALIDATION_ERROR:
            outcome = "invalid"
        elif not response.success:
            outcome = "error"
        elif not response.products:
            outcome = "no_results"
        else:
            outcome = "success"
        track_search_request(path, outcome, time.perf_counter() - start_time)
