"""Storage credential health states."""

from enum import Enum


class HealthStatus(str, Enum):
    """Health of a connected storage account.

    String Enum:
        Inherits from str for easy serialization and database storage.
    """

    HEALTHY = "healthy"
    """Tokens are usable (possibly after a transparent refresh)."""

    DEGRADED = "degraded"
    """Recent provider calls failed transiently."""

    NEEDS_REAUTH = "needs_reauth"
    """No refresh path exists; the user must reconnect the account."""
