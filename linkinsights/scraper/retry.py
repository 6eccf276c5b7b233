"""Bounded retry wrapper for fallible async operations.

Every network-dependent step of the pipeline (login, scroll convergence) runs
through :func:`retry_async`.  Failures are not classified: any exception is
retried until the attempt budget is spent, after which the last exception is
re-raised unchanged so callers see the operation's own error type.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from linkinsights.scraper.models import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    label: str = "operation",
) -> T:
    """Await ``operation()`` up to ``policy.max_attempts`` times.

    Waits ``policy.base_delay * attempt`` seconds between attempts (linear,
    not exponential).

    Raises:
        Exception: The exception raised by the final attempt, verbatim.
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if attempt >= policy.max_attempts:
                logger.error(
                    "[%s] attempt %d/%d failed, giving up: %s",
                    label, attempt, policy.max_attempts, exc,
                )
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                "[%s] attempt %d/%d failed: %s; retrying in %.1fs",
                label, attempt, policy.max_attempts, exc, delay,
            )
            await asyncio.sleep(delay)

    # max_attempts >= 1 is enforced by RetryPolicy, so the loop always returns or raises.
    raise AssertionError("unreachable")
