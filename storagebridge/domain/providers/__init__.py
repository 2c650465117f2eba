"""Storage provider catalog."""

from storagebridge.domain.providers.registry import (
    STORAGE_PROVIDER_CATALOG,
    StorageProviderMetadata,
    get_all_provider_slugs,
    get_provider_metadata,
)

__all__ = [
    "STORAGE_PROVIDER_CATALOG",
    "StorageProviderMetadata",
    "get_all_provider_slugs",
    "get_provider_metadata",
]
