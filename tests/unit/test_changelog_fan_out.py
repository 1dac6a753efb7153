"""Unit tests for the changelog.fan_out module."""

import asyncio

import pytest

from deployment_changelog.changelog.exceptions import ChangelogStageError
from deployment_changelog.changelog.fan_out import fan_out, unique


@pytest.mark.asyncio
async def test_results_keep_input_order() -> None:
    """Test that results come back in input order even when branches finish out of order."""

    async def operation(item: int) -> int:
        await asyncio.sleep(0.01 * (5 - item))
        return item * 10

    results = await fan_out([1, 2, 3, 4], operation, stage="test", describe=str)
    assert results == [10, 20, 30, 40]


@pytest.mark.asyncio
async def test_empty_input_returns_empty_list() -> None:
    """Test that an empty stage performs no work."""

    async def operation(item: int) -> int:
        raise AssertionError("should not be called")

    assert await fan_out([], operation, stage="test", describe=str) == []


@pytest.mark.asyncio
async def test_concurrency_is_capped() -> None:
    """Test that no more than max_concurrency branches run at once."""
    in_flight = 0
    peak = 0

    async def operation(item: int) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return item

    results = await fan_out(list(range(10)), operation, stage="test", describe=str, max_concurrency=3)
    assert results == list(range(10))
    assert peak == 3


@pytest.mark.asyncio
async def test_failure_is_wrapped_and_cancels_siblings() -> None:
    """Test that one failing branch fails the stage and cancels the slow branches."""
    cancelled: list[int] = []

    async def operation(item: int) -> int:
        if item == 2:
            raise ValueError("bad item")
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(item)
            raise
        return item

    with pytest.raises(ChangelogStageError) as excinfo:
        await fan_out([1, 2, 3], operation, stage="pull_requests", describe=lambda item: f"item {item}")

    assert excinfo.value.stage == "pull_requests"
    assert excinfo.value.subject == "item 2"
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert sorted(cancelled) == [1, 3]


@pytest.mark.asyncio
async def test_first_failure_wins() -> None:
    """Test that the earliest failing branch is the one reported."""

    async def operation(item: int) -> int:
        await asyncio.sleep(0.01 * item)
        raise RuntimeError(f"failure {item}")

    with pytest.raises(ChangelogStageError) as excinfo:
        await fan_out([3, 1, 2], operation, stage="issues", describe=lambda item: f"item {item}")
    assert excinfo.value.subject == "item 1"


@pytest.mark.asyncio
async def test_invalid_concurrency_is_rejected() -> None:
    """Test that a concurrency cap below one is rejected."""

    async def operation(item: int) -> int:
        return item

    with pytest.raises(ValueError):
        await fan_out([1], operation, stage="test", describe=str, max_concurrency=0)


def test_unique_keeps_first_occurrence_order() -> None:
    """Test that unique drops repeats and keeps the first-seen order."""
    assert unique([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_unique_with_key() -> None:
    """Test that unique compares items by key and keeps the first item per key."""
    items = [("ISSUE-1", "a"), ("ISSUE-2", "b"), ("ISSUE-1", "c")]
    assert unique(items, key=lambda item: item[0]) == [("ISSUE-1", "a"), ("ISSUE-2", "b")]
