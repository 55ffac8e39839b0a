"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from product_finder.api.app import app
from product_finder.api.dependencies import get_vector_store
from product_finder.embeddings.models import EmbeddingResult
from product_finder.prompts.provider import InMemoryPromptTemplateProvider

TEMPLATES = {
    "product_finder": {
        "system_prompt": "You are a product finder.",
        "user_message_template": "Query: %query%\nProducts:\n%products_list%",
        "user_message_template_with_image": (
            "Query: %user_query%\nImage: %image_description%\n"
            "Products:\n%products_list%"
        ),
        "no_results_message": "No matching products.",
    },
    "image_description": {
        "default_prompt": "Describe this image.",
    },
}


@pytest.fixture
def prompt_provider() -> InMemoryPromptTemplateProvider:
    """Prompt templates with predictable content."""
    return InMemoryPromptTemplateProvider(TEMPLATES)


@pytest.fixture
def embedding_service() -> AsyncMock:
    """Embedding service returning a fixed three-dimensional vector."""
    service = AsyncMock()
    service.embed.return_value = EmbeddingResult(
        text="query",
        embedding=[0.1, 0.2, 0.3],
        model="test-model",
        dimensions=3,
    )
    return service


@pytest.fixture
def vector_store() -> AsyncMock:
    """Vector store with an existing, empty collection."""
    store = AsyncMock()
    store.search.return_value = []
    store.collection_exists.return_value = True
    return store


@pytest.fixture
def llm_client() -> AsyncMock:
    """Chat completion client returning a fixed recommendation."""
    client = AsyncMock()
    client.complete.return_value = "I recommend Phone X."
    return client


@pytest.fixture
def image_describer() -> AsyncMock:
    """Image describer returning a fixed description."""
    describer = AsyncMock()
    describer.describe.return_value = "A black waterproof phone"
    return describer


@pytest.fixture
async def client(vector_store: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    The vector store is replaced so readiness checks need no Qdrant server.

    Yields:
        AsyncClient configured for testing.
    """
    app.dependency_overrides[get_vector_store] = lambda: vector_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
