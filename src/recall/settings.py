# src/recall/settings.py
"""Behavioral settings for Recall.

Settings apply regardless of which embedding provider or store is used. They
are passed programmatically; the library itself never reads environment
variables. Applications wanting env or file based configuration go through
``recall.config``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

# Rate limit profile definitions
RATE_LIMIT_PROFILES: dict[str, dict[str, Any]] = {
    "aggressive": {
        "max_concurrent_embeddings": 16,
        "max_attempts": 5,
    },
    "conservative": {
        "max_concurrent_embeddings": 1,
        "max_attempts": 6,
        "retry_initial_wait": 2.0,
        "retry_max_wait": 30.0,
    },
}


class Settings(BaseModel):
    """Behavioral settings for Recall.

    Example:
        settings = Settings(max_chunk_size=2000, min_similarity=0.5)

        # Or use a rate limit profile for free API tiers
        settings = Settings.with_profile("conservative")
    """

    # Chunking
    max_chunk_size: int = Field(default=8000, gt=0)

    # Retrieval
    default_k: int = Field(default=5, gt=0)
    min_similarity: float = Field(default=0.7, ge=-1.0, le=1.0)

    # Embedding
    embedding_dimension: int = Field(default=1536, gt=0)

    # Concurrency for async ingestion
    max_concurrent_embeddings: int = Field(default=4, gt=0)

    # Retry on ProviderUnavailable (bounded exponential backoff)
    max_attempts: int = Field(default=3, ge=1)
    retry_initial_wait: float = Field(default=0.5, ge=0.0)
    retry_max_wait: float = Field(default=8.0, ge=0.0)

    # Retries LiteLLM performs internally per request (0 = leave it to Recall)
    num_retries: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_waits(self) -> Settings:
        if self.retry_max_wait < self.retry_initial_wait:
            raise ValueError("retry_max_wait must be >= retry_initial_wait")
        return self

    @classmethod
    def with_profile(
        cls,
        profile: Literal["aggressive", "conservative"],
        **overrides: Any,
    ) -> Settings:
        """Create Settings with a rate limit profile.

        - "aggressive": paid API tiers with high rate limits
        - "conservative": free tiers or APIs with strict rate limits

        Args:
            profile: The rate limit profile to use.
            **overrides: Additional settings to override profile defaults.
        """
        if profile not in RATE_LIMIT_PROFILES:
            raise ValueError(
                f"Unknown profile '{profile}'. "
                f"Available profiles: {list(RATE_LIMIT_PROFILES.keys())}"
            )

        profile_settings: dict[str, Any] = RATE_LIMIT_PROFILES[profile].copy()
        profile_settings.update(overrides)
        return cls(**profile_settings)
