"""Concurrent scatter/gather and deduplication helpers for changelog aggregation."""

import asyncio
from typing import Awaitable, Callable, Hashable, Iterable, Sequence, TypeVar

import structlog

from deployment_changelog.changelog.exceptions import ChangelogStageError
from deployment_changelog.utils.constants import DEFAULT_MAX_CONCURRENCY

logger = structlog.get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def fan_out(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    *,
    stage: str,
    describe: Callable[[T], str],
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[R]:
    """Run ``operation`` once per item concurrently and gather the results in input order.

    At most ``max_concurrency`` operations are in flight at once. The call
    returns only after every branch has settled. If any branch fails, the
    remaining branches are cancelled and the first failure is raised as a
    ChangelogStageError chained to the underlying exception.
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
    if not items:
        return []

    semaphore = asyncio.Semaphore(max_concurrency)

    async def run(item: T) -> R:
        async with semaphore:
            try:
                return await operation(item)
            except Exception as exc:
                subject = describe(item)
                logger.error("Changelog stage branch failed", stage=stage, subject=subject, error=str(exc))
                raise ChangelogStageError(stage, subject, str(exc)) from exc

    try:
        async with asyncio.TaskGroup() as task_group:
            tasks = [task_group.create_task(run(item)) for item in items]
    except ExceptionGroup as group:
        # Siblings are cancelled once one branch fails, so the first error is the one that tripped the group
        raise group.exceptions[0]

    return [task.result() for task in tasks]


def unique(items: Iterable[T], key: Callable[[T], Hashable] | None = None) -> list[T]:
    """Drop repeated items while keeping the first occurrence order.

    Without ``key`` items are compared by value, so they must be hashable.
    """
    seen: dict[Hashable, T] = {}
    for item in items:
        identity: Hashable = item if key is None else key(item)  # type: ignore[assignment]
        if identity not in seen:
            seen[identity] = item
    return list(seen.values())
