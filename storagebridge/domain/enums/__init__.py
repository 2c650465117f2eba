"""Domain enums package.

Usage:
    from storagebridge.domain.enums import HealthStatus, MediaType, StorageCapability
"""

from storagebridge.domain.enums.health_status import HealthStatus
from storagebridge.domain.enums.media_type import MediaType
from storagebridge.domain.enums.storage_capability import StorageCapability

__all__ = ["HealthStatus", "MediaType", "StorageCapability"]
