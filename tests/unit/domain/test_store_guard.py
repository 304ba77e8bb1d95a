"""Unit tests for the store timeout and retry policy."""

import asyncio

import pytest

from core.exceptions import ConcurrentUpdateError, StoreUnavailableError
from domain.services.store_guard import StorePolicy, run_guarded


async def test_returns_operation_result():
    async def operation() -> int:
        return 42

    assert await run_guarded(StorePolicy(), operation, name="test") == 42


async def test_timeout_becomes_store_unavailable():
    async def operation() -> None:
        await asyncio.sleep(1)

    with pytest.raises(StoreUnavailableError) as exc_info:
        await run_guarded(StorePolicy(timeout_seconds=0.01), operation, name="slow")

    assert exc_info.value.status_code == 503


async def test_conflict_not_retried_by_default():
    calls = 0

    async def operation() -> None:
        nonlocal calls
        calls += 1
        raise ConcurrentUpdateError()

    with pytest.raises(ConcurrentUpdateError):
        await run_guarded(StorePolicy(max_attempts=3), operation, name="once")

    assert calls == 1


async def test_conflict_retried_until_success():
    calls = 0

    async def operation() -> str:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise ConcurrentUpdateError()
        return "saved"

    result = await run_guarded(
        StorePolicy(max_attempts=3), operation, name="retry", retry_on_conflict=True
    )

    assert result == "saved"
    assert calls == 3


async def test_other_errors_propagate_without_retry():
    calls = 0

    async def operation() -> None:
        nonlocal calls
        calls += 1
        raise ValueError("boom")

    with pytest.raises(ValueError):
        await run_guarded(StorePolicy(), operation, name="err", retry_on_conflict=True)

    assert calls == 1
