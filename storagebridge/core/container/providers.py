"""Storage provider registry factory (catalog-driven).

The registry is built once per process from STORAGE_PROVIDER_CATALOG.
Every catalog entry is registered, configured or not: an adapter without
client credentials reports ``is_configured == False`` and fails each call
with ProviderNotConfiguredError, so a missing Dropbox app key never stops
the process from starting.

When adding a provider, add its catalog entry and a case in
``_build_adapter``; the registry compliance test fails until both exist.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

import structlog

from storagebridge.core.config import Settings, get_settings
from storagebridge.domain.providers.registry import STORAGE_PROVIDER_CATALOG

if TYPE_CHECKING:
    from storagebridge.domain.protocols.storage_provider_protocol import (
        StorageProviderProtocol,
    )
    from storagebridge.infrastructure.providers.provider_registry import (
        StorageProviderRegistry,
    )

logger = structlog.get_logger(__name__)


def _build_adapter(slug: str, settings: Settings) -> "StorageProviderProtocol":
    """Instantiate the adapter for a catalog slug.

    Raises:
        ValueError: If the catalog names a provider with no adapter.
    """
    match slug:
        case "google-drive":
            from storagebridge.infrastructure.providers.google_drive import (
                GoogleDriveProvider,
            )

            return GoogleDriveProvider(
                settings=settings, timeout=settings.provider_timeout
            )

        case "dropbox":
            from storagebridge.infrastructure.providers.dropbox import DropboxProvider

            return DropboxProvider(settings=settings, timeout=settings.provider_timeout)

        case _:
            raise ValueError(f"No adapter implemented for storage provider: {slug}")


def build_storage_registry(settings: Settings) -> "StorageProviderRegistry":
    """Build a registry holding one adapter per catalog entry."""
    from storagebridge.infrastructure.providers.provider_registry import (
        StorageProviderRegistry,
    )

    registry = StorageProviderRegistry()
    for metadata in STORAGE_PROVIDER_CATALOG:
        adapter = _build_adapter(metadata.slug, settings)
        registry.register(metadata.slug, adapter)
        if not adapter.is_configured:
            logger.info(
                "storage_provider_not_configured",
                provider=metadata.slug,
                required_settings=metadata.required_settings,
            )
    return registry


@lru_cache()
def get_storage_registry() -> "StorageProviderRegistry":
    """Get storage provider registry singleton (app-scoped)."""
    return build_storage_registry(get_settings())
