"""
Embeddings Adapter - Text embedding providers.
"""

from .factory import get_embedder
from .ollama import OllamaEmbedder
from .sentence_transformer import SentenceTransformerEmbedder

__all__ = ["SentenceTransformerEmbedder", "OllamaEmbedder", "get_embedder"]
