"""Image description through a vision-capable chat model."""

import base64
from abc import ABC, abstractmethod

from product_finder.config import LLMSettings, get_settings
from product_finder.exceptions import CompletionError, ImageDescriptionError
from product_finder.llm.client import ChatCompletionClient
from product_finder.llm.models import Message, Role
from product_finder.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_DESCRIPTION_PROMPT = (
    "Describe this image in detail. What objects are present? "
    "What is happening? What product might this be related to?"
)


class ImageDescriptionService(ABC):
    """Produces a text description of an image."""

    @abstractmethod
    async def describe(
        self,
        image: bytes,
        mime_type: str,
        prompt: str | None = None,
    ) -> str:
        """Describe ``image``.

        Raises:
            ImageDescriptionError: If no description could be produced.
        """
        ...


class VisionImageDescriptionService(ImageDescriptionService):
    """Sends the image inline as a data URL to the configured vision model."""

    def __init__(
        self,
        client: ChatCompletionClient,
        settings: LLMSettings | None = None,
        default_prompt: str = DEFAULT_DESCRIPTION_PROMPT,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings().llm
        self._default_prompt = default_prompt

    async def describe(
        self,
        image: bytes,
        mime_type: str,
        prompt: str | None = None,
    ) -> str:
        if not image:
            raise ImageDescriptionError("Image is empty")

        encoded = base64.b64encode(image).decode("ascii")
        data_url = f"data:{mime_type or 'image/jpeg'};base64,{encoded}"
        message = Message(
            role=Role.USER,
            content=[
                {"type": "text", "text": prompt or self._default_prompt},
                {"type": "image_url", "image_url": {"url": data_url}},
            ],
        )

        logger.info(
            "Generating image description",
            extra={"model": self._settings.vision_model, "bytes": len(image)},
        )

        try:
            result = await self._client.generate(
                [message],
                max_tokens=self._settings.vision_max_tokens,
                model=self._settings.vision_model,
            )
        except CompletionError as e:
            raise ImageDescriptionError(
                f"Failed to generate image description: {e.message}",
                details=e.details,
            ) from e

        description = result.content.strip()
        if not description:
            raise ImageDescriptionError(
                "Failed to generate image description: empty response",
                details={"model": self._settings.vision_model},
            )
        return description
