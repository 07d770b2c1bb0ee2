"""Opt-in re-invocation of an operation after a rate limit.

The clients only report the Retry-After hint. Callers that prefer waiting it
out wrap a whole operation with ``retry_after_rate_limit``.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from github_transparency.exceptions import GitHubRateLimitError
from github_transparency.utils.rate_limit import DEFAULT_RETRY_AFTER, format_time_remaining

logger = logging.getLogger(__name__)

T = TypeVar("T")


def wait_for_retry_after(retry_state: RetryCallState) -> float:
    """Wait as long as the last GitHubRateLimitError asked for."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    seconds = getattr(exc, "retry_after", DEFAULT_RETRY_AFTER)
    logger.warning(
        "Rate limited, retrying in %s (attempt %d)",
        format_time_remaining(seconds),
        retry_state.attempt_number,
    )
    return float(seconds)


async def retry_after_rate_limit(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 2,
) -> T:
    """Run ``operation``, re-running it after each rate limit up to ``attempts`` times.

    Only GitHubRateLimitError is retried; forbidden and other errors propagate
    on the first failure.
    """
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(GitHubRateLimitError),
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_for_retry_after,
        reraise=True,
    ):
        with attempt:
            return await operation()
    raise AssertionError("unreachable")  # pragma: no cover
