"""Bounded retry with a fixed interval between attempts."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from .exceptions import RepositoryLockedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INTERVAL = 0.5


def is_lock_failure(error: BaseException) -> bool:
    return isinstance(error, RepositoryLockedError)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry a call while it fails with a retryable error.

    The last retryable error is re-raised once ``max_attempts`` is used up.
    Errors rejected by ``retryable`` propagate on the first occurrence.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    interval: float = DEFAULT_INTERVAL
    retryable: Callable[[BaseException], bool] = is_lock_failure
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval < 0:
            raise ValueError("interval cannot be negative")

    def _should_retry(self, error: BaseException, attempt: int) -> bool:
        if not self.retryable(error) or attempt >= self.max_attempts:
            return False
        logger.warning(
            "Attempt %d/%d failed (%s); retrying in %.2fs",
            attempt,
            self.max_attempts,
            error,
            self.interval,
        )
        return True

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        attempt = 1
        while True:
            try:
                return fn(*args, **kwargs)
            except Exception as exc:
                if not self._should_retry(exc, attempt):
                    raise
            self.sleep(self.interval)
            attempt += 1

    async def call_async(self, fn: Callable[..., T | Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Like :meth:`call` but waits with ``asyncio.sleep``.

        ``fn`` may be a plain callable or return an awaitable.
        """

        attempt = 1
        while True:
            try:
                result = fn(*args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result
                return result
            except Exception as exc:
                if not self._should_retry(exc, attempt):
                    raise
            await asyncio.sleep(self.interval)
            attempt += 1


__all__ = ["RetryPolicy", "is_lock_failure", "DEFAULT_MAX_ATTEMPTS", "DEFAULT_INTERVAL"]
