"""Prompt template providers.

Templates are addressed by ``(section, key)`` and may contain ``%name%``
placeholders that are replaced with caller-supplied parameters.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from product_finder.exceptions import (
    ConfigurationError,
    ErrorCode,
    TemplateNotFoundError,
)
from product_finder.logging_config import get_logger

logger = get_logger(__name__)


class PromptTemplateProvider(ABC):
    """Resolves named prompt templates."""

    @abstractmethod
    def get(
        self,
        section: str,
        key: str,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Return the template ``section.key`` with ``%param%`` placeholders filled.

        Placeholders without a matching parameter are left as-is.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        ...


class InMemoryPromptTemplateProvider(PromptTemplateProvider):
    """Provider backed by a ``{section: {key: template}}`` mapping."""

    def __init__(self, templates: Mapping[str, Mapping[str, str]]) -> None:
        self._templates = {
            section: dict(entries) for section, entries in templates.items()
        }

    def get(
        self,
        section: str,
        key: str,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        entries = self._templates.get(section)
        if entries is None or key not in entries:
            raise TemplateNotFoundError(
                f"Prompt not found: {section}.{key}",
                details={"section": section, "key": key},
            )

        prompt = str(entries[key])
        for name, value in (params or {}).items():
            prompt = prompt.replace(f"%{name}%", str(value))
        return prompt


class YamlPromptTemplateProvider(InMemoryPromptTemplateProvider):
    """Provider that loads its templates once from a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._load(self.path))
        logger.info("Loaded prompt templates", extra={"path": str(self.path)})

    @staticmethod
    def _load(path: Path) -> dict[str, dict[str, str]]:
        if not path.exists():
            raise ConfigurationError(
                f"Prompts configuration file not found: {path}",
                details={"path": str(path)},
            )

        with path.open(encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise TemplateNotFoundError(
                    f"Invalid prompts file: {e}",
                    code=ErrorCode.TEMPLATE_STORE_ERROR,
                    details={"path": str(path)},
                ) from e

        if not isinstance(data, dict) or not all(
            isinstance(entries, dict) for entries in data.values()
        ):
            raise TemplateNotFoundError(
                "Prompts file must map sections to key/template pairs",
                code=ErrorCode.TEMPLATE_STORE_ERROR,
                details={"path": str(path)},
            )
        return data
