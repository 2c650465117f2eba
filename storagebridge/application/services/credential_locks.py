"""Per-credential asyncio locks.

One lock per credential id, created on first use and dropped when the last
holder or waiter leaves, so the map does not grow with every credential
ever refreshed. In-process only: multiple worker processes each hold their
own registry.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID


class CredentialLockRegistry:
    """Keyed asyncio.Lock registry (app-scoped singleton)."""

    def __init__(self) -> None:
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._users: dict[UUID, int] = {}

    @asynccontextmanager
    async def hold(self, credential_id: UUID) -> AsyncIterator[None]:
        """Hold the lock for ``credential_id`` for the duration of the block."""
        lock = self._locks.setdefault(credential_id, asyncio.Lock())
        self._users[credential_id] = self._users.get(credential_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[credential_id] -= 1
            if self._users[credential_id] == 0:
                del self._users[credential_id]
                del self._locks[credential_id]

    def __len__(self) -> int:
        return len(self._locks)
