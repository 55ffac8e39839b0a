"""Application exception hierarchy.

All custom exceptions inherit from ProductFinderError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "PF-1000"
    CONFIGURATION_ERROR = "PF-1001"
    VALIDATION_ERROR = "PF-1002"

    # Product import errors (2xxx)
    PRODUCT_IMPORT_ERROR = "PF-2000"
    PRODUCT_PARSE_ERROR = "PF-2001"
    PRODUCT_INVALID = "PF-2002"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "PF-3000"
    EMBEDDING_DIMENSION_MISMATCH = "PF-3001"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "PF-4000"
    COLLECTION_NOT_FOUND = "PF-4001"
    COLLECTION_EXISTS = "PF-4002"

    # Chat completion errors (5xxx)
    LLM_SERVICE_ERROR = "PF-5000"
    LLM_TIMEOUT = "PF-5001"
    LLM_RATE_LIMIT = "PF-5002"
    IMAGE_DESCRIPTION_ERROR = "PF-5003"

    # Prompt template errors (6xxx)
    TEMPLATE_NOT_FOUND = "PF-6000"
    TEMPLATE_STORE_ERROR = "PF-6001"

    # Search pipeline errors (7xxx)
    REQUEST_TIMEOUT = "PF-7000"


class ProductFinderError(Exception):
    """Base exception for all product finder errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(ProductFinderError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(ProductFinderError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class ProductImportError(ProductFinderError):
    """Product catalogue import error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PRODUCT_IMPORT_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class EmbeddingError(ProductFinderError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SearchError(ProductFinderError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class CompletionError(ProductFinderError):
    """Chat completion service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ImageDescriptionError(CompletionError):
    """Vision model failed to describe an image."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.IMAGE_DESCRIPTION_ERROR, details)


class TemplateNotFoundError(ProductFinderError):
    """Prompt template lookup error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TEMPLATE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
