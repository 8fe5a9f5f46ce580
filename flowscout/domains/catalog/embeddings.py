"""
Embedding Resolution - Bounded, failure-tolerant calls into an embedding provider.

Every provider call goes through ``resolve_embedding``: it applies a timeout,
validates the returned vector and turns any failure into ``None`` so callers
can treat the text as carrying no semantic signal.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from flowscout.config.errors import EmbeddingError, ErrorCode

from .contracts import EmbeddingProvider

logger = logging.getLogger(__name__)

__all__ = [
    "CallableEmbedder",
    "EmbedFn",
    "as_embedding_provider",
    "as_vector",
    "resolve_embedding",
]

EmbedFn = Callable[[str], "np.ndarray | Sequence[float]"]


class CallableEmbedder:
    """
    Adapt a plain synchronous function to the EmbeddingProvider contract.

    The function runs in a worker thread so a slow provider never blocks
    the event loop.

    Example:
        >>> embedder = CallableEmbedder(model.encode)
        >>> vector = await embedder.embed("send slack message")
    """

    def __init__(self, fn: EmbedFn) -> None:
        self._fn = fn

    async def embed(self, text: str) -> np.ndarray | Sequence[float]:
        return await asyncio.to_thread(self._fn, text)

    def __repr__(self) -> str:
        return f"CallableEmbedder({self._fn!r})"


def as_embedding_provider(embedder: EmbeddingProvider | EmbedFn | None) -> EmbeddingProvider | None:
    """Wrap a bare callable; pass providers and None through."""
    if embedder is None or isinstance(embedder, EmbeddingProvider):
        return embedder
    if callable(embedder):
        return CallableEmbedder(embedder)
    raise TypeError(f"Unsupported embedder: {type(embedder).__name__}")


def as_vector(raw: Any) -> np.ndarray:
    """
    Validate provider output and freeze it as a 1-D float vector.

    Raises:
        EmbeddingError: Output is empty, not 1-D or contains non-finite values
    """
    try:
        vector = np.array(raw, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise EmbeddingError(
            f"Embedding is not numeric: {e}", code=ErrorCode.EMBEDDING_MALFORMED
        ) from e

    # Batch-shaped output from single-text encoders
    if vector.ndim == 2 and vector.shape[0] == 1:
        vector = vector[0].copy()

    if vector.ndim != 1 or vector.size == 0:
        raise EmbeddingError(
            "Embedding must be a non-empty 1-D vector",
            details={"shape": list(vector.shape)},
            code=ErrorCode.EMBEDDING_MALFORMED,
        )
    if not np.all(np.isfinite(vector)):
        raise EmbeddingError(
            "Embedding contains non-finite values", code=ErrorCode.EMBEDDING_MALFORMED
        )

    vector.setflags(write=False)
    return vector


async def resolve_embedding(
    provider: EmbeddingProvider,
    text: str,
    timeout: float,
) -> np.ndarray | None:
    """
    Embed text, returning None on timeout, provider error or malformed output.

    Args:
        provider: Embedding provider
        text: Text to embed
        timeout: Seconds before the call is abandoned

    Returns:
        Read-only vector, or None when no signal could be obtained
    """
    try:
        raw = await asyncio.wait_for(provider.embed(text), timeout=timeout)
        return as_vector(raw)
    except asyncio.TimeoutError:
        logger.warning("Embedding timed out after %.1fs (text='%s')", timeout, text[:50])
    except EmbeddingError as e:
        logger.warning("Embedding failed: %s", e)
    except Exception as e:
        # Caller-supplied providers may raise anything
        logger.warning("Embedding provider error (%s): %s", type(e).__name__, e)
    return None
