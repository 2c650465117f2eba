"""Core errors package.

Usage:
    from storagebridge.core.errors import DomainError, NotFoundError
"""

from storagebridge.core.errors.common_errors import NotFoundError, ValidationError
from storagebridge.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
