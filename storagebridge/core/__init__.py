"""Core shared kernel.

This module provides foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Base error classes for domain-level error handling
- Settings and fixed constants

The core module has NO dependencies on other application layers.
"""

from storagebridge.core.enums import ErrorCode
from storagebridge.core.errors import DomainError, NotFoundError, ValidationError
from storagebridge.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "NotFoundError",
    "Result",
    "Success",
    "ValidationError",
]
