"""Cache protocol for domain layer.

Architecture:
- Protocol-based - uses structural typing
- All operations return Result types
- Fail-open strategy: cache failures must not break core functionality
"""

from typing import Protocol

from storagebridge.core.errors import DomainError
from storagebridge.core.result import Result


class CacheProtocol(Protocol):
    """Cache protocol - what the domain needs from a key/value cache."""

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get value from cache (None on miss)."""
        ...

    async def set(
        self, key: str, value: str, ttl: int | None = None
    ) -> Result[None, DomainError]:
        """Set value with optional TTL in seconds."""
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete key; True if it existed."""
        ...

    async def get_and_delete(self, key: str) -> Result[str | None, DomainError]:
        """Atomically read and remove a key (None on miss)."""
        ...

    async def ping(self) -> Result[bool, DomainError]:
        """Check cache connectivity."""
        ...
