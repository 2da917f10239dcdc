# src/recall/retry.py
"""Bounded exponential backoff for transient provider failures."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from recall.exceptions import ProviderUnavailable

if TYPE_CHECKING:
    from recall.settings import Settings

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    sleep = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        f"Provider unavailable (attempt {retry_state.attempt_number}), "
        f"retrying in {sleep:.2f}s: {exc}"
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Retry ProviderUnavailable with exponential backoff; never retry anything else.

    Args:
        max_attempts: Total attempts including the first call.
        initial_wait: Wait before the first retry, doubled on each further retry.
        max_wait: Upper bound on a single wait.
    """

    max_attempts: int = 3
    initial_wait: float = 0.5
    max_wait: float = 8.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            max_attempts=settings.max_attempts,
            initial_wait=settings.retry_initial_wait,
            max_wait=settings.retry_max_wait,
        )

    def _retry_kwargs(self) -> dict[str, Any]:
        return {
            "stop": stop_after_attempt(self.max_attempts),
            "wait": wait_exponential(
                multiplier=self.initial_wait, min=self.initial_wait, max=self.max_wait
            ),
            "retry": retry_if_exception_type(ProviderUnavailable),
            "before_sleep": _log_retry,
            "reraise": True,
        }

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``fn`` under this policy. The last ProviderUnavailable is re-raised."""
        return Retrying(**self._retry_kwargs())(fn, *args, **kwargs)

    async def acall(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``fn`` under this policy."""
        return await AsyncRetrying(**self._retry_kwargs())(fn, *args, **kwargs)
