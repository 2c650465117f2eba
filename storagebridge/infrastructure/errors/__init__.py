"""Infrastructure errors package."""

from storagebridge.infrastructure.errors.infrastructure_error import (
    CacheError,
    InfrastructureError,
)

__all__ = ["CacheError", "InfrastructureError"]
