"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from flowscout.config.errors import InvalidQueryError
from flowscout.domains.catalog.models import Complexity, WorkflowDocument

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 100


class FieldWeights(BaseModel):
    """Per-field weights for lexical matching."""

    title: float = Field(default=0.4, ge=0.0)
    description: float = Field(default=0.3, ge=0.0)
    services: float = Field(default=0.15, ge=0.0)
    actions: float = Field(default=0.1, ge=0.0)
    keywords: float = Field(default=0.05, ge=0.0)

    model_config = {"frozen": True}

    def items(self) -> list[tuple[str, float]]:
        """(field, weight) pairs in scoring order."""
        return [
            ("title", self.title),
            ("description", self.description),
            ("services", self.services),
            ("actions", self.actions),
            ("keywords", self.keywords),
        ]


class FusionWeights(BaseModel):
    """Weights for combining lexical and semantic scores."""

    lexical: float = Field(default=0.6, ge=0.0)
    semantic: float = Field(default=0.4, ge=0.0)

    model_config = {"frozen": True}


class SearchTuning(BaseModel):
    """Ranking tunables (defaults are the production values)."""

    field_weights: FieldWeights = Field(default_factory=FieldWeights)
    fusion_weights: FusionWeights = Field(default_factory=FusionWeights)
    lexical_acceptance_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    lexical_candidate_limit: int = Field(default=20, ge=1)
    semantic_candidate_limit: int = Field(default=20, ge=1)
    embedding_timeout: float = Field(default=10.0, gt=0.0)
    embedding_concurrency: int = Field(default=8, ge=1)

    model_config = {"frozen": True}


class SearchFilters(BaseModel):
    """Structured constraints; unknown keys are ignored."""

    services: frozenset[str] = frozenset()
    category: str | None = None
    complexity: Complexity | None = None
    min_rating: float | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("services", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return frozenset() if value is None else value

    @field_validator("services", mode="after")
    @classmethod
    def _drop_blank_services(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(s.strip() for s in value if s.strip())

    @field_validator("complexity", mode="before")
    @classmethod
    def _normalize_complexity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @property
    def is_empty(self) -> bool:
        return (
            not self.services
            and self.category is None
            and self.complexity is None
            and self.min_rating is None
        )


class SearchQuery(BaseModel):
    """Search request. Empty text means browse mode."""

    text: str = ""
    filters: SearchFilters | None = None
    limit: int = DEFAULT_LIMIT

    model_config = {"frozen": True}

    @field_validator("limit", mode="after")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return max(MIN_LIMIT, min(MAX_LIMIT, value))

    @property
    def is_browse(self) -> bool:
        return not self.text.strip()

    @classmethod
    def parse(
        cls,
        text: str | None = "",
        filters: SearchFilters | dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> SearchQuery:
        """
        Build a query from loose input.

        Out-of-range limits are clamped and unknown filter keys dropped;
        only structurally invalid input is rejected.

        Raises:
            InvalidQueryError: Wrong types for text, filters or limit
        """
        payload: dict[str, Any] = {"text": text or "", "filters": filters}
        if limit is not None:
            payload["limit"] = limit

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidQueryError(
                "Malformed search query",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e


class ScoredCandidate(BaseModel):
    """A document's fused signals within one search call."""

    document_id: str
    position: int
    lexical_score: float = 0.0
    lexical_rank: int | None = None
    semantic_score: float = 0.0
    semantic_rank: int | None = None
    combined_score: float = 0.0

    model_config = {"frozen": True}

    @classmethod
    def build(
        cls,
        document_id: str,
        position: int,
        weights: FusionWeights,
        lexical: tuple[float, int] | None = None,
        semantic: tuple[float, int] | None = None,
    ) -> ScoredCandidate:
        """Create a candidate and compute its combined score once."""
        lexical_score, lexical_rank = lexical if lexical else (0.0, None)
        semantic_score, semantic_rank = semantic if semantic else (0.0, None)
        return cls(
            document_id=document_id,
            position=position,
            lexical_score=lexical_score,
            lexical_rank=lexical_rank,
            semantic_score=semantic_score,
            semantic_rank=semantic_rank,
            combined_score=lexical_score * weights.lexical + semantic_score * weights.semantic,
        )

    def sort_key(self) -> tuple[float, float, int]:
        """Descending score, then best lexical rank, then insertion order."""
        rank = self.lexical_rank if self.lexical_rank is not None else math.inf
        return (-self.combined_score, rank, self.position)


class ScoredDocumentView(BaseModel):
    """Single search result."""

    id: str
    title: str
    description: str
    services: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()
    category: str
    combined_score: float = 0.0

    # Diagnostics
    lexical_score: float = 0.0
    semantic_score: float = 0.0
    lexical_rank: int | None = None
    semantic_rank: int | None = None

    @classmethod
    def from_candidate(
        cls, document: WorkflowDocument, candidate: ScoredCandidate
    ) -> ScoredDocumentView:
        return cls(
            id=document.id,
            title=document.title,
            description=document.description,
            services=document.services,
            actions=document.actions,
            category=document.category,
            combined_score=candidate.combined_score,
            lexical_score=candidate.lexical_score,
            semantic_score=candidate.semantic_score,
            lexical_rank=candidate.lexical_rank,
            semantic_rank=candidate.semantic_rank,
        )
