"""
Embedder Factory - Build the configured embedding provider.
"""

from __future__ import annotations

import logging

from flowscout.config import Settings
from flowscout.domains.catalog.contracts import EmbeddingProvider

from .ollama import OllamaEmbedder
from .sentence_transformer import SentenceTransformerEmbedder

logger = logging.getLogger(__name__)

__all__ = ["get_embedder"]


def get_embedder(settings: Settings) -> EmbeddingProvider | None:
    """
    Create the embedding provider named by settings.embedding_provider.

    Returns:
        Provider instance, or None for lexical-only search

    Raises:
        ValueError: Unknown provider name
    """
    provider = settings.embedding_provider.strip().lower()

    if provider in ("", "none", "off"):
        logger.info("Embeddings disabled, search is lexical-only")
        return None
    if provider == "sentence_transformers":
        return SentenceTransformerEmbedder(model_name=settings.embedding_model)
    if provider == "ollama":
        return OllamaEmbedder(
            model=settings.ollama_embedding_model,
            base_url=settings.ollama_url,
            timeout=settings.embedding_timeout,
        )

    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")
