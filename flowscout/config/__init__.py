"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    CorpusLoadError,
    DocumentValidationError,
    EmbeddingError,
    ErrorCode,
    FlowScoutError,
    InvalidQueryError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "FlowScoutError",
    "EmbeddingError",
    "DocumentValidationError",
    "InvalidQueryError",
    "CorpusLoadError",
]
