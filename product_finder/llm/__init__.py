"""Chat completion and vision clients."""

from product_finder.llm.client import ChatCompletionClient, OpenAICompatibleClient
from product_finder.llm.models import GenerationResult, Message, Role
from product_finder.llm.vision import (
    DEFAULT_DESCRIPTION_PROMPT,
    ImageDescriptionService,
    VisionImageDescriptionService,
)

__all__ = [
    "DEFAULT_DESCRIPTION_PROMPT",
    "ChatCompletionClient",
    "GenerationResult",
    "ImageDescriptionService",
    "Message",
    "OpenAICompatibleClient",
    "Role",
    "VisionImageDescriptionService",
]
