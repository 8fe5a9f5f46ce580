"""
Search Domain - Hybrid ranking over the workflow template catalog.

This domain handles:
- Fuzzy lexical matching (RapidFuzz)
- Embedding similarity matching
- Weighted rank fusion with structured filters
- Browse mode for empty queries
"""

from .contracts import SearchEngine
from .fusion import browse, fuse, matches_filters
from .hybrid_search import HybridSearchEngine
from .lexical import LexicalMatcher
from .models import (
    FieldWeights,
    FusionWeights,
    ScoredCandidate,
    ScoredDocumentView,
    SearchFilters,
    SearchQuery,
    SearchTuning,
)
from .semantic import SemanticMatcher, cosine_similarity

__all__ = [
    "SearchEngine",
    "HybridSearchEngine",
    "LexicalMatcher",
    "SemanticMatcher",
    "cosine_similarity",
    "fuse",
    "browse",
    "matches_filters",
    "SearchQuery",
    "SearchFilters",
    "SearchTuning",
    "FieldWeights",
    "FusionWeights",
    "ScoredCandidate",
    "ScoredDocumentView",
]
