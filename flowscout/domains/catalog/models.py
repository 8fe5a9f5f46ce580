"""
Catalog Models - Data types for the workflow template corpus.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Complexity(str, Enum):
    """Complexity tag attached to a workflow template."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"


class WorkflowDocument(BaseModel):
    """One workflow template in the corpus."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    services: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    category: str = "uncategorized"
    complexity: Complexity = Complexity.UNKNOWN
    rating: float = 0.0
    original_filename: str | None = None
    nodes_count: int = 0
    use_cases: tuple[str, ...] = ()

    model_config = {"frozen": True, "extra": "ignore", "str_strip_whitespace": True}

    @field_validator("services", "actions", "keywords", "use_cases", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("complexity", mode="before")
    @classmethod
    def _coerce_complexity(cls, value: Any) -> Any:
        # Loose corpora carry free-form tags; anything unrecognised is "unknown"
        if value is None:
            return Complexity.UNKNOWN
        if isinstance(value, str):
            try:
                return Complexity(value.strip().lower())
            except ValueError:
                return Complexity.UNKNOWN
        return value

    @property
    def search_text(self) -> str:
        """Concatenated text used for embeddings."""
        parts = [self.title, self.description, *self.services, *self.actions, *self.keywords]
        return " ".join(part for part in parts if part)


class LoadReport(BaseModel):
    """Outcome of a corpus load."""

    accepted_count: int = 0
    rejected: list[tuple[str, str]] = Field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


class CatalogStats(BaseModel):
    """Summary of the loaded corpus."""

    total_documents: int
    categories: dict[str, int] = Field(default_factory=dict)
    services: list[str] = Field(default_factory=list)
    complexity: dict[str, int] = Field(default_factory=dict)
