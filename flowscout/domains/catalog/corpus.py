"""
Corpus Store - In-memory workflow templates with a lazy embedding cache.

Features:
- Per-document validation with a load report (bad records never abort a load)
- Immutable snapshots swapped atomically on reload
- Compute-once embedding cache with per-document locks
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

import numpy as np
from pydantic import ValidationError

from flowscout.config.errors import DocumentValidationError

from .contracts import EmbeddingProvider
from .embeddings import resolve_embedding
from .models import CatalogStats, LoadReport, WorkflowDocument

logger = logging.getLogger(__name__)

__all__ = ["CorpusSnapshot", "CorpusStore", "build_documents"]

DEFAULT_EMBEDDING_TIMEOUT = 10.0


class CorpusSnapshot:
    """
    Immutable view of one loaded corpus plus its embedding cache.

    A search captures a snapshot once and reads only from it, so a
    concurrent reload is never observed half-applied.
    """

    def __init__(self, documents: Sequence[WorkflowDocument] = ()) -> None:
        self._documents = tuple(documents)
        self._by_id = {doc.id: doc for doc in self._documents}
        self._positions = {doc.id: i for i, doc in enumerate(self._documents)}
        if len(self._by_id) != len(self._documents):
            raise ValueError("Document ids must be unique within a snapshot")

        self._embeddings: dict[str, np.ndarray] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: Counter[str] = Counter()

    @property
    def documents(self) -> tuple[WorkflowDocument, ...]:
        return self._documents

    def all(self) -> Iterator[WorkflowDocument]:
        """Iterate documents in insertion order."""
        return iter(self._documents)

    def get(self, document_id: str) -> WorkflowDocument | None:
        return self._by_id.get(document_id)

    def position(self, document_id: str) -> int:
        """Insertion index of a document (used for deterministic tie-breaks)."""
        return self._positions[document_id]

    def cached_embedding(self, document_id: str) -> np.ndarray | None:
        return self._embeddings.get(document_id)

    async def embedding_of(
        self,
        document_id: str,
        provider: EmbeddingProvider,
        timeout: float = DEFAULT_EMBEDDING_TIMEOUT,
    ) -> np.ndarray | None:
        """
        Return the document's embedding, computing and caching it on first use.

        Concurrent callers for the same document share one provider call;
        other documents fill independently. Failures are not cached.

        Args:
            document_id: Document to embed
            provider: Embedding provider
            timeout: Seconds allowed for the provider call

        Returns:
            Cached vector, or None if the provider failed this time

        Raises:
            KeyError: Unknown document id
        """
        cached = self._embeddings.get(document_id)
        if cached is not None:
            return cached

        document = self._by_id[document_id]
        # A lock lives only while callers hold or await it, so a later event loop
        # never meets a lock bound to an earlier one.
        lock = self._locks.setdefault(document_id, asyncio.Lock())
        self._lock_users[document_id] += 1
        try:
            async with lock:
                cached = self._embeddings.get(document_id)
                if cached is not None:
                    return cached

                vector = await resolve_embedding(provider, document.search_text, timeout)
                if vector is None:
                    logger.debug("No embedding for document %s", document_id)
                    return None

                self._embeddings[document_id] = vector
                return vector
        finally:
            self._lock_users[document_id] -= 1
            if not self._lock_users[document_id]:
                del self._lock_users[document_id]
                del self._locks[document_id]

    def stats(self) -> CatalogStats:
        """Category, service and complexity breakdown."""
        categories = Counter(doc.category for doc in self._documents)
        complexity = Counter(doc.complexity.value for doc in self._documents)
        services = sorted({s for doc in self._documents for s in doc.services}, key=str.lower)
        return CatalogStats(
            total_documents=len(self._documents),
            categories=dict(categories.most_common()),
            services=services,
            complexity=dict(complexity),
        )

    def __len__(self) -> int:
        return len(self._documents)


def _raw_identifier(raw: Any, index: int) -> str:
    """Best human-readable handle for a raw record in reports."""
    if isinstance(raw, Mapping):
        for key in ("id", "original_filename", "title"):
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return f"#{index}"


def _validate(raw: Any, index: int, seen_ids: set[str]) -> WorkflowDocument:
    """
    Turn one raw record into a document.

    Raises:
        DocumentValidationError: Record is malformed or duplicates an id
    """
    if not isinstance(raw, Mapping):
        raise DocumentValidationError(f"expected a mapping, got {type(raw).__name__}")

    data = dict(raw)
    raw_id = data.get("id")
    if raw_id is None or (isinstance(raw_id, str) and not raw_id.strip()):
        data["id"] = f"{data.get('category') or 'uncategorized'}/{index}"
    elif not isinstance(raw_id, (str, int)):
        raise DocumentValidationError(f"id must be a string, got {type(raw_id).__name__}")
    else:
        data["id"] = str(raw_id).strip()

    try:
        document = WorkflowDocument.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "record" for err in e.errors()
        )
        raise DocumentValidationError(
            f"invalid fields: {fields}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    if document.id in seen_ids:
        raise DocumentValidationError(f"duplicate id '{document.id}'")
    return document


def build_documents(raw_documents: Iterable[Any]) -> tuple[list[WorkflowDocument], LoadReport]:
    """
    Validate raw records into documents.

    Args:
        raw_documents: Mappings with at least title and description

    Returns:
        Tuple of (accepted documents in input order, load report)
    """
    documents: list[WorkflowDocument] = []
    rejected: list[tuple[str, str]] = []
    seen_ids: set[str] = set()

    for index, raw in enumerate(raw_documents):
        try:
            document = _validate(raw, index, seen_ids)
        except DocumentValidationError as e:
            identifier = _raw_identifier(raw, index)
            logger.warning("Rejected document %s: %s", identifier, e.message)
            rejected.append((identifier, e.message))
            continue

        seen_ids.add(document.id)
        documents.append(document)

    return documents, LoadReport(accepted_count=len(documents), rejected=rejected)


class CorpusStore:
    """
    Owner of the current corpus snapshot.

    Example:
        >>> store = CorpusStore()
        >>> report = store.load(records)
        >>> for doc in store.all():
        ...     print(doc.title)
    """

    def __init__(
        self,
        snapshot: CorpusSnapshot | None = None,
        embedding_timeout: float = DEFAULT_EMBEDDING_TIMEOUT,
    ) -> None:
        """
        Initialize corpus store.

        Args:
            snapshot: Initial snapshot (empty if omitted)
            embedding_timeout: Default timeout for embedding_of()
        """
        self._snapshot = snapshot if snapshot is not None else CorpusSnapshot()
        self._embedding_timeout = embedding_timeout

    @classmethod
    def from_documents(
        cls,
        raw_documents: Iterable[Any],
        embedding_timeout: float = DEFAULT_EMBEDDING_TIMEOUT,
    ) -> CorpusStore:
        """Create a store and load records into it."""
        store = cls(embedding_timeout=embedding_timeout)
        store.load(raw_documents)
        return store

    @property
    def snapshot(self) -> CorpusSnapshot:
        return self._snapshot

    def load(self, raw_documents: Iterable[Any]) -> LoadReport:
        """
        Replace the corpus with freshly validated records.

        The new snapshot (with an empty embedding cache) is installed in a
        single assignment; searches already running keep the old one.

        Args:
            raw_documents: Raw records

        Returns:
            LoadReport with accepted count and rejected records
        """
        documents, report = build_documents(raw_documents)
        self._snapshot = CorpusSnapshot(documents)

        logger.info(
            "Corpus loaded: %d accepted, %d rejected",
            report.accepted_count,
            report.rejected_count,
        )
        return report

    def all(self) -> Iterator[WorkflowDocument]:
        return self._snapshot.all()

    def get(self, document_id: str) -> WorkflowDocument | None:
        return self._snapshot.get(document_id)

    async def embedding_of(
        self,
        document_id: str,
        provider: EmbeddingProvider,
        timeout: float | None = None,
    ) -> np.ndarray | None:
        """Resolve a document embedding against the current snapshot."""
        return await self._snapshot.embedding_of(
            document_id,
            provider,
            timeout=self._embedding_timeout if timeout is None else timeout,
        )

    def stats(self) -> CatalogStats:
        return self._snapshot.stats()

    def __len__(self) -> int:
        return len(self._snapshot)
