"""
Adapters - External service integrations.

All external calls are wrapped here to isolate domains from third-party changes.
"""

from .embeddings import OllamaEmbedder, SentenceTransformerEmbedder, get_embedder
from .filesystem import CorpusSource, load_corpus_directory

__all__ = [
    "SentenceTransformerEmbedder",
    "OllamaEmbedder",
    "get_embedder",
    "CorpusSource",
    "load_corpus_directory",
]
