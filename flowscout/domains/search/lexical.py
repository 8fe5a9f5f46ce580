"""
Lexical Matcher - Typo- and reorder-tolerant fuzzy matching over weighted fields.

Each field is scored with the mean of RapidFuzz's token-set and token-sort
ratios (normalised Indel edit-distance similarities over sorted tokens).
The set ratio forgives a query that covers only part of a field; the sort
ratio charges for the extra words, so only an exact token match scores 1.0.
Field scores are combined as a weighted average over the fields the document
actually populates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rapidfuzz import fuzz, utils

from flowscout.domains.catalog.models import WorkflowDocument

from .models import FieldWeights

logger = logging.getLogger(__name__)

__all__ = ["LexicalMatcher", "field_similarity"]

SCORE_PRECISION = 6


def _field_text(document: WorkflowDocument, field: str) -> str:
    value = getattr(document, field)
    if isinstance(value, tuple):
        return " ".join(value)
    return value


def field_similarity(processed_query: str, text: str) -> float:
    """Similarity of a query and one field in [0, 1]; 1.0 only for the same tokens."""
    covered = fuzz.token_set_ratio(processed_query, text, processor=utils.default_process)
    ordered = fuzz.token_sort_ratio(processed_query, text, processor=utils.default_process)
    return (covered + ordered) / 200.0


class LexicalMatcher:
    """
    Weighted fuzzy matcher over document fields.

    Example:
        >>> matcher = LexicalMatcher()
        >>> matcher.match("gmail slack notification", corpus.all())
        [('wf-12', 0.83), ('wf-3', 0.61)]
    """

    def __init__(
        self,
        field_weights: FieldWeights | None = None,
        acceptance_threshold: float = 0.5,
        candidate_limit: int = 20,
    ) -> None:
        """
        Initialize lexical matcher.

        Args:
            field_weights: Per-field weights (title 0.4 ... keywords 0.05)
            acceptance_threshold: Minimum combined field score to keep a document
            candidate_limit: Maximum number of matches returned
        """
        self._weights = [(f, w) for f, w in (field_weights or FieldWeights()).items() if w > 0]
        self._threshold = acceptance_threshold
        self._limit = candidate_limit

    def score_document(self, processed_query: str, document: WorkflowDocument) -> float:
        """
        Weighted field similarity in [0, 1].

        Empty fields are left out of both numerator and denominator so a
        template without keywords is not penalised for it.
        """
        total = 0.0
        total_weight = 0.0
        for field, weight in self._weights:
            text = _field_text(document, field)
            if not text:
                continue
            total += weight * field_similarity(processed_query, text)
            total_weight += weight

        if total_weight == 0.0:
            return 0.0
        return min(1.0, total / total_weight)

    def match(
        self,
        query_text: str,
        population: Iterable[WorkflowDocument],
    ) -> list[tuple[str, float]]:
        """
        Rank documents by lexical similarity.

        Args:
            query_text: Raw query
            population: Documents in insertion order

        Returns:
            (document_id, lexical_score) pairs, best first, at most candidate_limit
        """
        processed = utils.default_process(query_text)
        if not processed:
            return []

        scored: list[tuple[str, float, int]] = []
        for position, document in enumerate(population):
            combined = self.score_document(processed, document)
            if combined < self._threshold:
                continue
            scored.append((document.id, round(combined, SCORE_PRECISION), position))

        scored.sort(key=lambda item: (-item[1], item[2]))
        matches = [(doc_id, score) for doc_id, score, _ in scored[: self._limit]]

        logger.debug(
            "Lexical match: query='%s' -> %d accepted, %d returned",
            query_text[:50],
            len(scored),
            len(matches),
        )
        return matches
