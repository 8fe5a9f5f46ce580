"""
Tests for embedding provider adapters.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import httpx
import numpy as np
import pytest

from flowscout.config import Settings
from flowscout.config.errors import EmbeddingError, ErrorCode
from flowscout.domains.catalog.contracts import EmbeddingProvider

from .factory import get_embedder
from .ollama import OllamaEmbedder
from .sentence_transformer import SentenceTransformerEmbedder


@pytest.fixture
def mock_sentence_transformer() -> Generator[MagicMock, None, None]:
    """Mock the SentenceTransformer class."""
    with patch(
        "flowscout.adapters.embeddings.sentence_transformer.SentenceTransformer"
    ) as mock:
        mock.return_value.encode.return_value = np.array([0.6, 0.8], dtype=np.float64)
        yield mock


def _ollama(handler) -> OllamaEmbedder:
    return OllamaEmbedder(base_url="http://ollama.test", transport=httpx.MockTransport(handler))


# --- SentenceTransformerEmbedder Tests ---


async def test_sentence_transformer_embed(mock_sentence_transformer: MagicMock) -> None:
    """Test text is encoded with normalisation."""
    embedder = SentenceTransformerEmbedder("all-MiniLM-L6-v2", device="cpu")

    vector = await embedder.embed("gmail to slack")

    assert vector.dtype == np.float32
    np.testing.assert_allclose(vector, [0.6, 0.8], rtol=1e-6)
    mock_sentence_transformer.assert_called_once_with("all-MiniLM-L6-v2", device="cpu")
    mock_sentence_transformer.return_value.encode.assert_called_once_with(
        "gmail to slack", normalize_embeddings=True
    )


async def test_sentence_transformer_loads_model_once(
    mock_sentence_transformer: MagicMock,
) -> None:
    """Test the model is loaded lazily and reused."""
    embedder = SentenceTransformerEmbedder()
    mock_sentence_transformer.assert_not_called()

    await embedder.embed("one")
    await embedder.embed("two")

    assert mock_sentence_transformer.call_count == 1


async def test_sentence_transformer_failure_raises_embedding_error(
    mock_sentence_transformer: MagicMock,
) -> None:
    """Test encoder exceptions surface as EmbeddingError."""
    mock_sentence_transformer.return_value.encode.side_effect = RuntimeError("CUDA OOM")
    embedder = SentenceTransformerEmbedder()

    with pytest.raises(EmbeddingError) as exc_info:
        await embedder.embed("text")

    assert exc_info.value.code == ErrorCode.EMBEDDING_UNAVAILABLE
    assert exc_info.value.details == {"model": "all-MiniLM-L6-v2"}


async def test_sentence_transformer_warm_up_loads_model(
    mock_sentence_transformer: MagicMock,
) -> None:
    """Test warm_up loads the model without encoding and embed reuses it."""
    embedder = SentenceTransformerEmbedder()

    await embedder.warm_up()
    mock_sentence_transformer.return_value.encode.assert_not_called()
    await embedder.embed("text")

    assert mock_sentence_transformer.call_count == 1


async def test_sentence_transformer_warm_up_failure(
    mock_sentence_transformer: MagicMock,
) -> None:
    mock_sentence_transformer.side_effect = OSError("model not found")
    embedder = SentenceTransformerEmbedder("missing-model")

    with pytest.raises(EmbeddingError) as exc_info:
        await embedder.warm_up()

    assert exc_info.value.details == {"model": "missing-model"}


def test_sentence_transformer_is_provider() -> None:
    assert isinstance(SentenceTransformerEmbedder(), EmbeddingProvider)


# --- OllamaEmbedder Tests ---


async def test_ollama_embed() -> None:
    """Test a successful embeddings request."""
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/embeddings"
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"embedding": [0.1, 0.2, 0.3]})

    embedder = _ollama(handler)
    vector = await embedder.embed("sync contacts")
    await embedder.close()

    np.testing.assert_allclose(vector, [0.1, 0.2, 0.3], rtol=1e-6)
    assert seen == [{"model": "nomic-embed-text", "prompt": "sync contacts"}]


async def test_ollama_http_error() -> None:
    embedder = _ollama(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(EmbeddingError) as exc_info:
        await embedder.embed("text")

    assert exc_info.value.code == ErrorCode.EMBEDDING_UNAVAILABLE
    assert exc_info.value.details["url"] == "http://ollama.test"


async def test_ollama_missing_embedding() -> None:
    embedder = _ollama(lambda request: httpx.Response(200, json={"error": "model not found"}))

    with pytest.raises(EmbeddingError) as exc_info:
        await embedder.embed("text")

    assert exc_info.value.code == ErrorCode.EMBEDDING_MALFORMED


async def test_ollama_invalid_json() -> None:
    embedder = _ollama(lambda request: httpx.Response(200, content=b"not json"))

    with pytest.raises(EmbeddingError) as exc_info:
        await embedder.embed("text")

    assert exc_info.value.code == ErrorCode.EMBEDDING_MALFORMED


async def test_ollama_retries_transport_errors() -> None:
    """Test a dropped connection is retried once."""
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"embedding": [1.0, 0.0]})

    vector = await _ollama(handler).embed("text")

    assert attempts == 2
    np.testing.assert_allclose(vector, [1.0, 0.0])


async def test_ollama_gives_up_after_retries() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EmbeddingError):
        await _ollama(handler).embed("text")


async def test_ollama_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(EmbeddingError) as exc_info:
        await _ollama(handler).embed("text")

    assert exc_info.value.code == ErrorCode.EMBEDDING_TIMEOUT


# --- Factory Tests ---


@pytest.mark.parametrize("name", ["none", "OFF", ""])
def test_factory_disabled(name: str) -> None:
    assert get_embedder(Settings(embedding_provider=name)) is None


def test_factory_sentence_transformers() -> None:
    embedder = get_embedder(
        Settings(embedding_provider="sentence_transformers", embedding_model="paraphrase-MiniLM")
    )
    assert isinstance(embedder, SentenceTransformerEmbedder)
    assert embedder.model_name == "paraphrase-MiniLM"


def test_factory_ollama() -> None:
    embedder = get_embedder(
        Settings(
            embedding_provider="ollama",
            ollama_url="http://gpu-box:11434/",
            ollama_embedding_model="mxbai-embed-large",
        )
    )
    assert isinstance(embedder, OllamaEmbedder)
    assert embedder.base_url == "http://gpu-box:11434"
    assert embedder.model == "mxbai-embed-large"


def test_factory_unknown_provider() -> None:
    with pytest.raises(ValueError, match="openai"):
        get_embedder(Settings(embedding_provider="openai"))
