"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from flowscout.config.errors import ErrorCode, FlowScoutError

    raise FlowScoutError(ErrorCode.CORPUS_LOAD_FAILED, "Corpus directory missing")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Corpus errors
    CORPUS_LOAD_FAILED = "CORPUS_LOAD_FAILED"
    DOCUMENT_INVALID = "DOCUMENT_INVALID"

    # Search errors
    SEARCH_INVALID_QUERY = "SEARCH_INVALID_QUERY"

    # Embedding provider errors
    EMBEDDING_UNAVAILABLE = "EMBEDDING_UNAVAILABLE"
    EMBEDDING_TIMEOUT = "EMBEDDING_TIMEOUT"
    EMBEDDING_MALFORMED = "EMBEDDING_MALFORMED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FlowScoutError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Domain-specific exceptions for cleaner imports
class EmbeddingError(FlowScoutError):
    """Embedding provider errors (unreachable, timeout, malformed output)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.EMBEDDING_UNAVAILABLE,
    ) -> None:
        super().__init__(code, message, details)


class DocumentValidationError(FlowScoutError):
    """A single corpus document failed validation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.DOCUMENT_INVALID, message, details)


class InvalidQueryError(FlowScoutError):
    """Search request could not be parsed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_INVALID_QUERY, message, details)


class CorpusLoadError(FlowScoutError):
    """Corpus source could not be read at all."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CORPUS_LOAD_FAILED, message, details)
