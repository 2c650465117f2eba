"""Core enums package.

Usage:
    from storagebridge.core.enums import ErrorCode, Environment
"""

from storagebridge.core.enums.environment import Environment
from storagebridge.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
