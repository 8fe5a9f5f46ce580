"""
Hybrid Search Engine - Combines fuzzy lexical and embedding search.

Features:
- RapidFuzz weighted-field lexical matching
- Embedding cosine similarity with a lazy per-document cache
- Weighted score fusion with deterministic tie-breaking
- Structured filters and browse mode for empty queries
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from flowscout.domains.catalog.contracts import EmbeddingProvider
from flowscout.domains.catalog.corpus import CorpusStore
from flowscout.domains.catalog.embeddings import EmbedFn, as_embedding_provider
from flowscout.domains.catalog.models import LoadReport

from .fusion import browse, fuse
from .lexical import LexicalMatcher
from .models import ScoredDocumentView, SearchFilters, SearchQuery, SearchTuning
from .semantic import SemanticMatcher

logger = logging.getLogger(__name__)

__all__ = ["HybridSearchEngine"]


class HybridSearchEngine:
    """
    Hybrid search combining lexical and semantic approaches.

    Searches never fail because of the embedding provider: any provider
    error or timeout degrades the query to lexical-only.

    Example:
        >>> engine = HybridSearchEngine(corpus, embedder)
        >>> results = await engine.search(SearchQuery(text="gmail to slack"))
    """

    def __init__(
        self,
        corpus: CorpusStore,
        embedder: EmbeddingProvider | EmbedFn | None = None,
        tuning: SearchTuning | None = None,
    ) -> None:
        """
        Initialize hybrid search engine.

        Args:
            corpus: Corpus store (shared; reloads are picked up per search)
            embedder: Embedding provider or plain sync function; None for lexical-only
            tuning: Ranking tunables
        """
        self._corpus = corpus
        self._embedder = as_embedding_provider(embedder)
        self._tuning = tuning or SearchTuning()

        self._lexical = LexicalMatcher(
            field_weights=self._tuning.field_weights,
            acceptance_threshold=self._tuning.lexical_acceptance_threshold,
            candidate_limit=self._tuning.lexical_candidate_limit,
        )
        self._semantic = SemanticMatcher(
            candidate_limit=self._tuning.semantic_candidate_limit,
            embedding_timeout=self._tuning.embedding_timeout,
            concurrency=self._tuning.embedding_concurrency,
        )

    @property
    def corpus(self) -> CorpusStore:
        return self._corpus

    @property
    def tuning(self) -> SearchTuning:
        return self._tuning

    async def search(self, query: SearchQuery) -> list[ScoredDocumentView]:
        """
        Execute hybrid search.

        Args:
            query: Search query parameters

        Returns:
            List of results sorted by relevance (insertion order in browse mode)
        """
        snapshot = self._corpus.snapshot

        if query.is_browse:
            candidates = browse(snapshot, query.filters, query.limit)
            lexical_count = semantic_count = 0
        else:
            lexical, semantic = await asyncio.gather(
                asyncio.to_thread(self._lexical.match, query.text, snapshot.documents),
                self._semantic.match(query.text, snapshot, self._embedder),
            )
            lexical_count, semantic_count = len(lexical), len(semantic)
            candidates = fuse(
                lexical,
                semantic,
                snapshot,
                filters=query.filters,
                limit=query.limit,
                weights=self._tuning.fusion_weights,
            )

        results = []
        for candidate in candidates:
            document = snapshot.get(candidate.document_id)
            if document is not None:
                results.append(ScoredDocumentView.from_candidate(document, candidate))

        logger.info(
            "Hybrid search: query='%s' -> %d results (lexical=%d, semantic=%d)",
            query.text[:50],
            len(results),
            lexical_count,
            semantic_count,
        )

        return results

    async def search_text(
        self,
        text: str = "",
        filters: SearchFilters | dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[ScoredDocumentView]:
        """
        Parse loose input and search.

        Raises:
            InvalidQueryError: Filters or limit have the wrong types
        """
        return await self.search(SearchQuery.parse(text, filters, limit))

    def reload(self, raw_documents: Iterable[Any]) -> LoadReport:
        """Atomically replace the corpus; in-flight searches keep the old one."""
        return self._corpus.load(raw_documents)
