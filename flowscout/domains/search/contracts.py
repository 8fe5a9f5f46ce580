"""
Search Contracts - Interfaces for search domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ScoredDocumentView, SearchQuery


@runtime_checkable
class SearchEngine(Protocol):
    """Contract for search implementations."""

    async def search(
        self,
        query: SearchQuery,
    ) -> list[ScoredDocumentView]:
        """Execute search and return results."""
        ...
