# src/recall/exceptions.py
"""Exception hierarchy for Recall.

Provider errors split into two families because the orchestrator treats them
differently:

- ProviderUnavailable: transient (network, timeout, rate limit). Retried with
  bounded exponential backoff.
- ProviderRejected: permanent for the given input (empty text, oversized
  input, bad credentials). Never retried.

Store errors (InvalidDimension, InvalidScope) signal a caller or configuration
bug and are always surfaced immediately.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recall.models import IngestResult


class RecallError(Exception):
    """Base class for all Recall errors."""


class ProviderError(RecallError):
    """Raised when the embedding or LLM provider call fails."""

    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message)
        self.model = model


class ProviderUnavailable(ProviderError):
    """Transient provider failure (network, timeout, rate limit, 5xx)."""


class ProviderRejected(ProviderError):
    """Provider refused the input. Retrying the same input will not help."""


class StoreError(RecallError):
    """Raised by a vector store for invalid writes or queries."""


class InvalidDimension(StoreError):
    """Vector has the wrong dimension, non-finite values, or zero magnitude."""


class InvalidScope(StoreError):
    """Owner scope is missing or blank."""


class ExtractionError(RecallError):
    """Raised when text cannot be extracted for a content type."""


class IngestCancelled(asyncio.CancelledError):
    """Raised when an in-flight async ingest is cancelled.

    Subclasses CancelledError so cancellation keeps propagating through
    asyncio machinery (timeouts, task groups) while carrying the partial
    outcome.

    Attributes:
        result: What was persisted before cancellation. Every record in
            ``result.records`` has a stored row; every other ordinal is listed
            in ``result.failed_ordinals``.
    """

    def __init__(self, message: str, result: IngestResult) -> None:
        super().__init__(message)
        self.result = result


class KnowledgeExtractionError(RecallError):
    """Raised when an LLM response cannot be parsed into entities and relationships."""
