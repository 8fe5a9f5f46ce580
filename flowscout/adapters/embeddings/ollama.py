"""
Ollama Embedder - Embeddings from a local Ollama server.

Features:
- Async HTTP client
- Retry on transient transport errors
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import numpy as np
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from flowscout.config.errors import EmbeddingError, ErrorCode

logger = logging.getLogger(__name__)

__all__ = ["OllamaEmbedder"]


class OllamaEmbedder:
    """
    Embedding provider backed by Ollama's /api/embeddings endpoint.

    Example:
        >>> embedder = OllamaEmbedder(model="nomic-embed-text")
        >>> vector = await embedder.embed("sync hubspot contacts to sheets")
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Ollama embedder.

        Args:
            model: Embedding model name
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (for testing)
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.2, max=1),
        reraise=True,
    )
    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        response = await client.post("/api/embeddings", json=payload)
        response.raise_for_status()
        data: dict[str, Any] = response.json()
        return data

    async def embed(self, text: str) -> np.ndarray:
        """
        Embed a single text.

        Raises:
            EmbeddingError: Request failed or timed out, or the response has no embedding
        """
        try:
            data = await self._request({"model": self.model, "prompt": text})
        except httpx.TimeoutException as e:
            raise EmbeddingError(
                f"Ollama embedding request timed out after {self.timeout}s",
                details={"model": self.model, "url": self.base_url},
                code=ErrorCode.EMBEDDING_TIMEOUT,
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingError(
                f"Ollama embedding request failed: {e}",
                details={"model": self.model, "url": self.base_url},
            ) from e
        except ValueError as e:
            raise EmbeddingError(
                f"Ollama returned invalid JSON: {e}", code=ErrorCode.EMBEDDING_MALFORMED
            ) from e

        embedding = data.get("embedding")
        if not embedding:
            raise EmbeddingError(
                "Ollama response has no embedding",
                details={"model": self.model},
                code=ErrorCode.EMBEDDING_MALFORMED,
            )
        return np.asarray(embedding, dtype=np.float32)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
