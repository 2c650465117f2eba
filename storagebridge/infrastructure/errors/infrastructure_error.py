"""Infrastructure layer error types.

Infrastructure errors represent failures in external systems (cache).

Architecture:
- Infrastructure catches exceptions and maps to DomainError
- Infrastructure errors inherit from DomainError (not Exception)
- InfrastructureErrorCode is kept for internal tracking

Note: Provider errors are defined in storagebridge.domain.errors because
they are part of the StorageProviderProtocol contract.
"""

from dataclasses import dataclass
from typing import Any

from storagebridge.core.errors import DomainError
from storagebridge.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode (maps from InfrastructureErrorCode).
        message: Human-readable message.
        infrastructure_code: Original infrastructure error code.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Wraps Redis exceptions (key, operation, original error in details)."""

    pass
