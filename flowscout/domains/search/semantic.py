"""
Semantic Matcher - Cosine similarity between query and document embeddings.
"""

from __future__ import annotations

import asyncio
import logging

import numpy as np

from flowscout.domains.catalog.contracts import EmbeddingProvider
from flowscout.domains.catalog.corpus import CorpusSnapshot
from flowscout.domains.catalog.embeddings import resolve_embedding
from flowscout.domains.catalog.models import WorkflowDocument

logger = logging.getLogger(__name__)

__all__ = ["SemanticMatcher", "cosine_similarity"]


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float | None:
    """
    Cosine similarity clamped to [-1, 1].

    Returns None when the vectors differ in length or either has zero norm;
    a degenerate embedding carries no signal rather than a score of 0.
    """
    if a.shape != b.shape:
        return None
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return None
    similarity = float(np.dot(a, b)) / (norm_a * norm_b)
    return float(np.clip(similarity, -1.0, 1.0))


class SemanticMatcher:
    """
    Embedding similarity ranking over a corpus snapshot.

    Example:
        >>> matcher = SemanticMatcher(candidate_limit=20)
        >>> await matcher.match("notify my team on slack", snapshot, embedder)
        [('wf-12', 0.83), ('wf-7', 0.61)]
    """

    def __init__(
        self,
        candidate_limit: int = 20,
        embedding_timeout: float = 10.0,
        concurrency: int = 8,
    ) -> None:
        """
        Initialize semantic matcher.

        Args:
            candidate_limit: Maximum number of matches returned
            embedding_timeout: Seconds allowed per provider call
            concurrency: Maximum in-flight document embedding calls
        """
        self._limit = candidate_limit
        self._timeout = embedding_timeout
        self._concurrency = concurrency

    async def match(
        self,
        query_text: str,
        snapshot: CorpusSnapshot,
        provider: EmbeddingProvider | None,
    ) -> list[tuple[str, float]]:
        """
        Rank documents by cosine similarity to the query.

        Args:
            query_text: Raw query
            snapshot: Corpus snapshot (embeddings are cached on it)
            provider: Embedding provider, or None for no semantic signal

        Returns:
            (document_id, semantic_score) pairs, best first, at most candidate_limit
        """
        if provider is None or not query_text.strip() or len(snapshot) == 0:
            return []

        query_vector = await resolve_embedding(provider, query_text, self._timeout)
        if query_vector is None:
            logger.info("Query embedding unavailable, semantic signal skipped")
            return []

        semaphore = asyncio.Semaphore(self._concurrency)

        async def _resolve(document: WorkflowDocument) -> np.ndarray | None:
            async with semaphore:
                return await snapshot.embedding_of(document.id, provider, self._timeout)

        documents = snapshot.documents
        vectors = await asyncio.gather(*(_resolve(doc) for doc in documents))

        scored: list[tuple[str, float, int]] = []
        skipped = 0
        for position, (document, vector) in enumerate(zip(documents, vectors)):
            similarity = None if vector is None else cosine_similarity(query_vector, vector)
            if similarity is None:
                skipped += 1
                continue
            scored.append((document.id, similarity, position))

        scored.sort(key=lambda item: (-item[1], item[2]))
        matches = [(doc_id, score) for doc_id, score, _ in scored[: self._limit]]

        logger.debug(
            "Semantic match: query='%s' -> %d scored, %d skipped, %d returned",
            query_text[:50],
            len(scored),
            skipped,
            len(matches),
        )
        return matches
