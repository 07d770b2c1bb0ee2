"""Wave-based concurrent fetching with per-task failure isolation."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchTask:
    """One detail record to fetch: an identifying key and its endpoint."""

    key: str
    endpoint: str


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    """Result of one task. ``item`` is None when the task was skipped."""

    task: FetchTask
    item: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BoundedConcurrentBatcher(Generic[T]):
    """Runs fetch tasks in waves of at most ``concurrency`` at a time.

    Every task in a wave settles before the next wave starts. A task that
    raises is recorded as skipped; the rest of the wave and later waves run
    regardless.
    """

    def __init__(
        self,
        fetch: Callable[[FetchTask], Awaitable[T]],
        concurrency: int = 10,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be a positive integer")
        self.fetch = fetch
        self.concurrency = concurrency

    async def run(self, tasks: Sequence[FetchTask]) -> list[FetchOutcome[T]]:
        """Resolve every task, preserving input order."""
        outcomes: list[FetchOutcome[T]] = []

        for i in range(0, len(tasks), self.concurrency):
            wave = tasks[i : i + self.concurrency]
            results = await asyncio.gather(
                *(self.fetch(task) for task in wave),
                return_exceptions=True,
            )

            for task, result in zip(wave, results):
                outcomes.append(self._settle(task, result))

        skipped = sum(1 for o in outcomes if not o.ok)
        if skipped:
            logger.debug("Skipped %d of %d fetch tasks", skipped, len(outcomes))
        return outcomes

    @staticmethod
    def _settle(task: FetchTask, result: Any) -> FetchOutcome[T]:
        if isinstance(result, Exception):
            logger.debug("Fetch %s failed: %s", task.key, result)
            return FetchOutcome(task=task, error=str(result) or type(result).__name__)
        if isinstance(result, BaseException):
            # CancelledError, KeyboardInterrupt and friends are not task failures
            raise result
        return FetchOutcome(task=task, item=result)

    @staticmethod
    def successful(outcomes: Sequence[FetchOutcome[T]]) -> list[T]:
        """Items of the tasks that succeeded."""
        return [o.item for o in outcomes if o.ok]
