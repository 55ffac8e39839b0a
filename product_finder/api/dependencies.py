"""Service wiring.

Each collaborator is built once per process from settings and shared by
all requests. Tests replace them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from product_finder.config import get_settings
from product_finder.embeddings.service import EmbeddingService, HTTPEmbeddingService
from product_finder.exceptions import TemplateNotFoundError
from product_finder.llm.client import ChatCompletionClient, OpenAICompatibleClient
from product_finder.llm.vision import (
    DEFAULT_DESCRIPTION_PROMPT,
    ImageDescriptionService,
    VisionImageDescriptionService,
)
from product_finder.logging_config import get_logger
from product_finder.prompts.provider import (
    PromptTemplateProvider,
    YamlPromptTemplateProvider,
)
from product_finder.search.orchestrator import ProductSearchOrchestrator
from product_finder.vectorstore.service import QdrantVectorStore, VectorStore

logger = get_logger(__name__)


@lru_cache
def get_embedding_service() -> HTTPEmbeddingService:
    return HTTPEmbeddingService(get_settings().embedding)


@lru_cache
def get_vector_store() -> QdrantVectorStore:
    return QdrantVectorStore(get_settings().qdrant)


@lru_cache
def get_llm_client() -> OpenAICompatibleClient:
    return OpenAICompatibleClient(get_settings().llm)


@lru_cache
def get_prompt_provider() -> YamlPromptTemplateProvider:
    return YamlPromptTemplateProvider(get_settings().prompts.path)


@lru_cache
def get_image_describer() -> VisionImageDescriptionService:
    try:
        prompt = get_prompt_provider().get("image_description", "default_prompt")
    except TemplateNotFoundError:
        prompt = DEFAULT_DESCRIPTION_PROMPT
    return VisionImageDescriptionService(
        get_llm_client(),
        get_settings().llm,
        default_prompt=prompt,
    )


def get_orchestrator(
    embedding_service: EmbeddingService = Depends(get_embedding_service),
    vector_store: VectorStore = Depends(get_vector_store),
    llm_client: ChatCompletionClient = Depends(get_llm_client),
    prompts: PromptTemplateProvider = Depends(get_prompt_provider),
    image_describer: ImageDescriptionService = Depends(get_image_describer),
) -> ProductSearchOrchestrator:
    """Assemble the search orchestrator from the shared services."""
    return ProductSearchOrchestrator(
        embedding_service=embedding_service,
        vector_store=vector_store,
        llm_client=llm_client,
        prompts=prompts,
        image_describer=image_describer,
    )


def build_orchestrator() -> ProductSearchOrchestrator:
    """Orchestrator wired outside a request (CLI)."""
    return get_orchestrator(
        embedding_service=get_embedding_service(),
        vector_store=get_vector_store(),
        llm_client=get_llm_client(),
        prompts=get_prompt_provider(),
        image_describer=get_image_describer(),
    )


async def close_services() -> None:
    """Close clients that were created and reset the caches."""
    if get_embedding_service.cache_info().currsize:
        await get_embedding_service().close()
    if get_vector_store.cache_info().currsize:
        await get_vector_store().close()
    if get_llm_client.cache_info().currsize:
        await get_llm_client().close()

    for getter in (
        get_embedding_service,
        get_vector_store,
        get_llm_client,
        get_prompt_provider,
        get_image_describer,
    ):
        getter.cache_clear()

    logger.debug("Closed service clients")
