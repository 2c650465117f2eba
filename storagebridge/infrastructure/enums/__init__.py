"""Infrastructure enums package.

Usage:
    from storagebridge.infrastructure.enums import InfrastructureErrorCode
"""

from storagebridge.infrastructure.enums.infrastructure_error_code import (
    InfrastructureErrorCode,
)

__all__ = ["InfrastructureErrorCode"]
