"""Timeout and optimistic-concurrency policy for units of work."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog

from core.exceptions import ConcurrentUpdateError, StoreUnavailableError

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class StorePolicy:
    """How long a unit of work may take and how often a stale write is retried."""

    timeout_seconds: float = 5.0
    max_attempts: int = 3


async def run_guarded(
    policy: StorePolicy,
    operation: Callable[[], Awaitable[T]],
    *,
    name: str,
    retry_on_conflict: bool = False,
) -> T:
    """Run one unit of work under the policy's timeout.

    ``operation`` must open its own unit of work so every retry starts from a
    fresh load of the document.

    Raises:
        StoreUnavailableError: If an attempt exceeds the timeout
        ConcurrentUpdateError: If every attempt lost a version race
    """
    attempts = max(policy.max_attempts, 1) if retry_on_conflict else 1
    attempt = 1
    while True:
        try:
            async with asyncio.timeout(policy.timeout_seconds):
                return await operation()
        except TimeoutError as exc:
            logger.warning(
                "store_timeout",
                operation=name,
                timeout_seconds=policy.timeout_seconds,
            )
            raise StoreUnavailableError("The data store did not respond in time") from exc
        except ConcurrentUpdateError:
            if attempt >= attempts:
                logger.warning("concurrent_update_exhausted", operation=name, attempts=attempt)
                raise
            logger.info("concurrent_update_retry", operation=name, attempt=attempt)
            attempt += 1
