"""Prompt template module."""

from product_finder.prompts.provider import (
    InMemoryPromptTemplateProvider,
    PromptTemplateProvider,
    YamlPromptTemplateProvider,
)

__all__ = [
    "InMemoryPromptTemplateProvider",
    "PromptTemplateProvider",
    "YamlPromptTemplateProvider",
]
