"""Storage provider adapters.

Usage:
    from storagebridge.infrastructure.providers import StorageProviderRegistry
"""

from storagebridge.infrastructure.providers.encryption_service import EncryptionService
from storagebridge.infrastructure.providers.provider_registry import (
    ProviderSummary,
    StorageProviderRegistry,
)

__all__ = ["EncryptionService", "ProviderSummary", "StorageProviderRegistry"]
