"""Helpers for bounding individual LLM and storage calls."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout: float | None) -> T:
    """
    Await a call, optionally bounded by a timeout.

    A timeout surfaces as TimeoutError, which callers handle like any other
    transport failure.

    Args:
        awaitable: The call to await
        timeout: Seconds to wait, or None for no limit

    Returns:
        The awaited result
    """
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout)
