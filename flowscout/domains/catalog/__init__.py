"""
Catalog Domain - The in-memory corpus of workflow templates.

This domain handles:
- Document validation and load reports
- Atomic corpus reload via immutable snapshots
- Lazy, compute-once embedding cache
"""

from .contracts import DocumentPopulation, EmbeddingProvider
from .corpus import CorpusSnapshot, CorpusStore, build_documents
from .embeddings import CallableEmbedder, as_embedding_provider, as_vector, resolve_embedding
from .models import CatalogStats, Complexity, LoadReport, WorkflowDocument

__all__ = [
    "EmbeddingProvider",
    "DocumentPopulation",
    "CorpusStore",
    "CorpusSnapshot",
    "build_documents",
    "CallableEmbedder",
    "as_embedding_provider",
    "as_vector",
    "resolve_embedding",
    "WorkflowDocument",
    "Complexity",
    "LoadReport",
    "CatalogStats",
]
