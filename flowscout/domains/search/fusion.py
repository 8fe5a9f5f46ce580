"""
Rank Fusion - Weighted score combination of lexical and semantic candidates.

Lexical matches are favoured (0.6 vs 0.4 by default): exact keyword hits are
a strong relevance signal for short templated titles.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from flowscout.domains.catalog.corpus import CorpusSnapshot
from flowscout.domains.catalog.models import WorkflowDocument

from .models import FusionWeights, ScoredCandidate, SearchFilters

logger = logging.getLogger(__name__)

__all__ = ["browse", "fuse", "matches_filters"]


def matches_filters(document: WorkflowDocument, filters: SearchFilters | None) -> bool:
    """Check a document against structured filters."""
    if filters is None:
        return True

    if filters.services:
        wanted = [s.lower() for s in filters.services]
        have = [s.lower() for s in document.services]
        if not any(w in h for w in wanted for h in have):
            return False

    if filters.category is not None and document.category != filters.category:
        return False

    if filters.complexity is not None and document.complexity != filters.complexity:
        return False

    if filters.min_rating is not None and document.rating < filters.min_rating:
        return False

    return True


def fuse(
    lexical: Sequence[tuple[str, float]],
    semantic: Sequence[tuple[str, float]],
    snapshot: CorpusSnapshot,
    filters: SearchFilters | None = None,
    limit: int = 10,
    weights: FusionWeights | None = None,
) -> list[ScoredCandidate]:
    """
    Merge two ranked lists into one filtered, truncated ordering.

    Args:
        lexical: (document_id, score) pairs from the lexical matcher, best first
        semantic: (document_id, score) pairs from the semantic matcher, best first
        snapshot: Corpus snapshot both lists were computed against
        filters: Structured constraints
        limit: Maximum candidates returned
        weights: Fusion weights (lexical 0.6, semantic 0.4)

    Returns:
        Candidates sorted by combined score
    """
    weights = weights or FusionWeights()

    lexical_hits: dict[str, tuple[float, int]] = {}
    for rank, (doc_id, score) in enumerate(lexical, 1):
        lexical_hits.setdefault(doc_id, (score, rank))

    semantic_hits: dict[str, tuple[float, int]] = {}
    for rank, (doc_id, score) in enumerate(semantic, 1):
        semantic_hits.setdefault(doc_id, (score, rank))

    candidates: list[ScoredCandidate] = []
    dropped = 0
    for doc_id in dict.fromkeys([*lexical_hits, *semantic_hits]):
        document = snapshot.get(doc_id)
        if document is None:
            logger.debug("Skipping unknown document %s", doc_id)
            continue
        if not matches_filters(document, filters):
            dropped += 1
            continue

        candidates.append(
            ScoredCandidate.build(
                doc_id,
                snapshot.position(doc_id),
                weights,
                lexical=lexical_hits.get(doc_id),
                semantic=semantic_hits.get(doc_id),
            )
        )

    candidates.sort(key=ScoredCandidate.sort_key)

    logger.debug(
        "Fusion: lexical=%d semantic=%d merged=%d filtered_out=%d",
        len(lexical_hits),
        len(semantic_hits),
        len(candidates) + dropped,
        dropped,
    )
    return candidates[:limit]


def browse(
    snapshot: CorpusSnapshot,
    filters: SearchFilters | None = None,
    limit: int = 10,
) -> list[ScoredCandidate]:
    """First `limit` documents passing the filters, in insertion order, unscored."""
    candidates: list[ScoredCandidate] = []
    for position, document in enumerate(snapshot.all()):
        if len(candidates) >= limit:
            break
        if matches_filters(document, filters):
            candidates.append(
                ScoredCandidate(document_id=document.id, position=position, combined_score=0.0)
            )
    return candidates
