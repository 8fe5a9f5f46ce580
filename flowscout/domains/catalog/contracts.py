"""
Catalog Contracts - Interfaces for the corpus and its embedding provider.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from .models import WorkflowDocument


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Contract for text embedding providers.

    Implementations must be safe to call concurrently and raise
    ``EmbeddingError`` when the provider cannot produce a vector.
    """

    async def embed(self, text: str) -> np.ndarray | Sequence[float]:
        """Map text to a fixed-length vector."""
        ...


@runtime_checkable
class DocumentPopulation(Protocol):
    """Contract for a read-only, ordered set of documents."""

    def all(self) -> Iterator[WorkflowDocument]:
        """Iterate documents in insertion order."""
        ...

    def get(self, document_id: str) -> WorkflowDocument | None:
        """Look up a document by id."""
        ...
