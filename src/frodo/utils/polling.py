"""Polling and fan-out helpers for multi-step operations.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool],
    *,
    interval: float,
    retries: int,
) -> tuple[T | None, bool]:
    """Re-fetch a value until ``predicate`` accepts it or the budget runs out.

    Each round sleeps ``interval`` seconds before fetching, so at most
    ``retries`` fetches are issued.

    Args:
        fetch: Coroutine factory returning the current value
        predicate: Condition the value must satisfy
        interval: Seconds between fetches
        retries: Maximum number of fetches

    Returns:
        The last fetched value and whether the predicate was satisfied.

    """
    value: T | None = None
    remaining = retries
    while remaining > 0:
        await asyncio.sleep(interval)
        value = await fetch()
        if predicate(value):
            return value, True
        remaining -= 1
    return value, False


async def gather_settled(
    *aws: Awaitable[Any],
) -> tuple[list[Any], list[Exception]]:
    """Await every awaitable and split the outcomes.

    Returns:
        Fulfilled results and rejected exceptions, each in submission order.

    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    fulfilled: list[Any] = []
    rejected: list[Exception] = []
    for result in results:
        if isinstance(result, Exception):
            rejected.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            fulfilled.append(result)
    return fulfilled, rejected
