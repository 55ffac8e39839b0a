"""Chat completion data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A message in a conversation.

    ``content`` is plain text, or a list of content parts
    (``{"type": "text", ...}`` / ``{"type": "image_url", ...}``) for vision models.
    """

    role: Role = Field(description="Message role")
    content: str | list[dict[str, Any]] = Field(description="Message content")

    def to_payload(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


class GenerationResult(BaseModel):
    """Result from a chat completion.

    Attributes:
        content: The generated text.
        model: Model used for generation.
        prompt_tokens: Number of tokens in the prompt.
        completion_tokens: Number of tokens in the completion.
        total_tokens: Total tokens used.
    """

    content: str = Field(description="Generated text")
    model: str = Field(description="Model used")
    prompt_tokens: int = Field(default=0, description="Prompt token count")
    completion_tokens: int = Field(default=0, description="Completion token count")
    total_tokens: int = Field(default=0, description="Total token count")
