"""
Per-key asyncio locking.

Serializes work that touches the same identity key while letting work on
unrelated keys run in parallel.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLock:
    """
    Mapping from key to asyncio.Lock with reference counting.

    Lock entries are created on first use and dropped once no coroutine holds
    or waits on them, so the mapping stays bounded by the number of keys in
    flight rather than the number of keys ever seen.

    Usage:
        locks = KeyedLock()
        async with locks.hold("entity:acme"):
            ...
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """
        Hold the lock for a key for the duration of the context.

        Args:
            key: Identity key to serialize on
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        """Number of keys currently held or awaited."""
        return len(self._locks)

    def __contains__(self, key: str) -> bool:
        return key in self._locks
