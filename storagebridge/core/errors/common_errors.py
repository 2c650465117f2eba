"""Common error classes used across all domains and layers.

Error Types:
- ValidationError: Input validation failures
- NotFoundError: Resource not found
"""

from dataclasses import dataclass

from storagebridge.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (Integration, Provider, etc.).
        resource_id: ID of the resource that was not found.
    """

    resource_type: str
    resource_id: str
