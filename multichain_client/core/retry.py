"""Retry and timeout combinators for transport operations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from loguru import logger

from multichain_client.utils.exceptions import OperationTimeoutError

T = TypeVar("T")

NO_TIMEOUT = -1


@dataclass(slots=True)
class RetryPolicy:
    """Bounded-attempt retry policy.

    `retryable_error` errors wait `retry_delay_ms` before the next attempt; other errors
    retry immediately. Without a class every error waits. `immediate_error` never waits,
    even when it is also a `retryable_error`. When `abort_if` returns True for an error, that
    error is raised at once with no further attempts.
    """

    max_retries: int = 3
    retry_delay_ms: int = 200
    retryable_error: type[BaseException] | None = None
    immediate_error: type[BaseException] | None = None
    abort_if: Callable[[BaseException], bool] | None = None

    def should_delay(self, exc: BaseException) -> bool:
        if self.immediate_error is not None and isinstance(exc, self.immediate_error):
            return False
        if self.retryable_error is None:
            return True
        return isinstance(exc, self.retryable_error)


async def with_timeout(
    operation: Awaitable[T],
    timeout_ms: int,
    error_factory: Callable[[], BaseException] | None = None,
) -> T:
    """Await `operation`, failing after `timeout_ms`. `-1` disables the timer.

    On timeout the operation is cancelled and its outcome discarded.
    """
    if timeout_ms == NO_TIMEOUT:
        return await operation
    try:
        return await asyncio.wait_for(operation, timeout=max(0, timeout_ms) / 1000.0)
    except asyncio.TimeoutError:
        if error_factory is not None:
            raise error_factory() from None
        raise OperationTimeoutError(timeout_ms) from None


async def with_retry(fn: Callable[[], Awaitable[T]], policy: RetryPolicy | None = None) -> T:
    """Run async callable up to `max_retries + 1` times; re-raise the last error."""
    policy = policy or RetryPolicy()
    attempts = max(0, policy.max_retries) + 1
    last_exc: Exception | None = None
    for attempt in range(attempts):
        try:
            return await fn()
        except Exception as exc:
            last_exc = exc
            if attempt >= attempts - 1:
                break
            if policy.abort_if is not None and policy.abort_if(exc):
                logger.debug("Attempt {}/{} failed ({}), not retrying", attempt + 1, attempts, exc)
                raise
            if policy.should_delay(exc):
                logger.debug("Attempt {}/{} failed ({}), retrying in {}ms", attempt + 1, attempts, exc, policy.retry_delay_ms)
                await asyncio.sleep(max(0, policy.retry_delay_ms) / 1000.0)
            else:
                logger.debug("Attempt {}/{} failed ({}), retrying now", attempt + 1, attempts, exc)
    assert last_exc is not None
    raise last_exc
