"""Chat completion client interface and OpenAI-compatible implementation."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from product_finder.config import LLMSettings, get_settings
from product_finder.exceptions import CompletionError, ErrorCode
from product_finder.llm.models import GenerationResult, Message
from product_finder.logging_config import get_logger
from product_finder.observability.metrics import track_llm_request

logger = get_logger(__name__)


class ChatCompletionClient(ABC):
    """Generates assistant replies for a list of messages."""

    @abstractmethod
    async def generate(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> GenerationResult:
        """Run a chat completion.

        Args:
            messages: Conversation messages.
            temperature: Sampling temperature override.
            max_tokens: Maximum tokens override.
            model: Model override (e.g. a vision model).

        Returns:
            GenerationResult with generated text and token usage.

        Raises:
            CompletionError: If generation fails.
        """
        ...

    async def complete(self, messages: list[Message]) -> str:
        """Return only the generated text for ``messages``."""
        result = await self.generate(messages)
        return result.content

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Default model name."""
        ...


class OpenAICompatibleClient(ChatCompletionClient):
    """Client for OpenAI-compatible ``/chat/completions`` endpoints.

    Works with:
    - OpenAI API
    - Ollama (localhost:11434/v1)
    - vLLM
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: LLM configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().llm
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        return self._settings.model

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        api_key = self._settings.api_key.get_secret_value()
        if api_key and api_key != "not-required":
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def generate(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> GenerationResult:
        client = await self._get_client()
        url = f"{self._settings.base_url.rstrip('/')}/chat/completions"
        model = model or self._settings.model

        payload: dict[str, Any] = {
            "model": model,
            "messages": [msg.to_payload() for msg in messages],
            "temperature": (
                temperature if temperature is not None else self._settings.temperature
            ),
            "max_tokens": max_tokens or self._settings.max_tokens,
        }

        start_time = time.perf_counter()
        try:
            response = await client.post(url, json=payload, headers=self._headers())
            response.raise_for_status()

        except httpx.TimeoutException as e:
            track_llm_request(model, time.perf_counter() - start_time, 0, 0, False)
            logger.error("Chat completion timed out", extra={"model": model})
            raise CompletionError(
                "Chat completion request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            track_llm_request(model, time.perf_counter() - start_time, 0, 0, False)
            logger.error(
                "Chat completion failed", extra={"model": model, "status": status}
            )

            if status == 429:
                raise CompletionError(
                    "Rate limit exceeded",
                    code=ErrorCode.LLM_RATE_LIMIT,
                    details={"status_code": status},
                ) from e

            raise CompletionError(
                f"Chat completion service returned {status}",
                details={"status_code": status},
            ) from e

        except httpx.RequestError as e:
            track_llm_request(model, time.perf_counter() - start_time, 0, 0, False)
            logger.error("Chat completion connection error", extra={"error": str(e)})
            raise CompletionError(
                f"Failed to connect to chat completion service: {e}",
                details={"url": url},
            ) from e

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
            usage = data.get("usage") or {}
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise CompletionError(
                f"Invalid response from chat completion service: {e}",
                details={"error": str(e)},
            ) from e

        if not isinstance(content, str):
            raise CompletionError(
                "Chat completion returned no text content",
                details={"model": model},
            )

        result = GenerationResult(
            content=content,
            model=data.get("model", model),
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
        )
        track_llm_request(
            model,
            time.perf_counter() - start_time,
            result.prompt_tokens,
            result.completion_tokens,
        )
        return result
