"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from flowscout.domains.search.models import SearchTuning


class Settings(BaseSettings):
    """Application settings."""

    # Corpus: one subdirectory per category, each with a metadata.json
    corpus_dir: Path = Path("data/workflows")

    # Embeddings: "sentence_transformers", "ollama" or "none" (lexical-only)
    embedding_provider: str = "sentence_transformers"
    embedding_model: str = "all-MiniLM-L6-v2"
    embedding_timeout: float = 10.0
    embedding_concurrency: int = 8

    # Ollama
    ollama_url: str = "http://localhost:11434"
    ollama_embedding_model: str = "nomic-embed-text"

    # Search
    search_default_limit: int = 10
    lexical_candidate_limit: int = 20
    semantic_candidate_limit: int = 20
    lexical_acceptance_threshold: float = 0.5

    # Lexical field weights
    weight_title: float = 0.4
    weight_description: float = 0.3
    weight_services: float = 0.15
    weight_actions: float = 0.1
    weight_keywords: float = 0.05

    # Fusion weights
    fusion_lexical_weight: float = 0.6
    fusion_semantic_weight: float = 0.4

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FLOWSCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def search_tuning(self) -> SearchTuning:
        """Build the ranking tunables from these settings."""
        from flowscout.domains.search.models import FieldWeights, FusionWeights, SearchTuning

        return SearchTuning(
            field_weights=FieldWeights(
                title=self.weight_title,
                description=self.weight_description,
                services=self.weight_services,
                actions=self.weight_actions,
                keywords=self.weight_keywords,
            ),
            fusion_weights=FusionWeights(
                lexical=self.fusion_lexical_weight,
                semantic=self.fusion_semantic_weight,
            ),
            lexical_acceptance_threshold=self.lexical_acceptance_threshold,
            lexical_candidate_limit=self.lexical_candidate_limit,
            semantic_candidate_limit=self.semantic_candidate_limit,
            embedding_timeout=self.embedding_timeout,
            embedding_concurrency=self.embedding_concurrency,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
