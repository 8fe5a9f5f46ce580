"""
Sentence Transformer Embedder - Local embedding model.

Features:
- Lazy model load on first use
- Encoding off the event loop (asyncio.to_thread)
- L2-normalised output
"""

from __future__ import annotations

import asyncio
import logging
import threading

import numpy as np
from sentence_transformers import SentenceTransformer

from flowscout.config.errors import EmbeddingError

logger = logging.getLogger(__name__)

__all__ = ["SentenceTransformerEmbedder"]


class SentenceTransformerEmbedder:
    """
    Embedding provider backed by a sentence-transformers model.

    Example:
        >>> embedder = SentenceTransformerEmbedder("all-MiniLM-L6-v2")
        >>> vector = await embedder.embed("post new invoices to slack")
    """

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        device: str | None = None,
        normalize: bool = True,
    ) -> None:
        """
        Initialize embedder.

        Args:
            model_name: Sentence transformer model name
            device: Torch device ("cpu", "cuda"); auto-detected if None
            normalize: L2-normalise embeddings
        """
        self.model_name = model_name
        self._device = device
        self._normalize = normalize
        self._model: SentenceTransformer | None = None
        self._load_lock = threading.Lock()

    def _get_model(self) -> SentenceTransformer:
        """Load the model once, even under concurrent first calls."""
        if self._model is None:
            with self._load_lock:
                if self._model is None:
                    logger.info("Loading embedding model: %s", self.model_name)
                    self._model = SentenceTransformer(self.model_name, device=self._device)
        return self._model

    def _encode(self, text: str) -> np.ndarray:
        model = self._get_model()
        vector = model.encode(text, normalize_embeddings=self._normalize)
        return np.asarray(vector, dtype=np.float32)

    async def warm_up(self) -> None:
        """
        Load the model ahead of the first search.

        Callers run this outside any per-call embedding timeout so a cold
        model load is not mistaken for a hung provider.

        Raises:
            EmbeddingError: Model failed to load
        """
        try:
            await asyncio.to_thread(self._get_model)
        except Exception as e:
            raise EmbeddingError(
                f"Sentence transformer failed to load: {e}",
                details={"model": self.model_name},
            ) from e

    async def embed(self, text: str) -> np.ndarray:
        """
        Embed a single text.

        Raises:
            EmbeddingError: Model failed to load or encode
        """
        try:
            return await asyncio.to_thread(self._encode, text)
        except Exception as e:
            raise EmbeddingError(
                f"Sentence transformer encode failed: {e}",
                details={"model": self.model_name},
            ) from e
