"""Storage provider catalog - static metadata for every supported drive.

Single source of truth for provider identity, capabilities and the
settings each adapter needs. The runtime StorageProviderRegistry is built
from this catalog by the container; a compliance test keeps the two in
sync.

When adding a new provider:
1. Add a StorageProviderMetadata entry here
2. Implement the adapter in storagebridge/infrastructure/providers/{name}/
3. Add the factory case in storagebridge/core/container/providers.py

Usage:
    from storagebridge.domain.providers.registry import get_provider_metadata

    metadata = get_provider_metadata("dropbox")
    if StorageCapability.PUBLIC_LINK in metadata.capabilities:
        ...
"""

from dataclasses import dataclass, field

from storagebridge.domain.enums import StorageCapability


@dataclass(frozen=True, kw_only=True)
class StorageProviderMetadata:
    """Metadata for a single storage provider adapter.

    Attributes:
        slug: Unique provider identifier, used in URLs, the credential
            store and media references.
        display_name: User-facing provider name.
        capabilities: Optional operations the adapter implements.
        required_settings: Settings attribute names that must be set for
            the adapter to report ``is_configured``.
        scopes: OAuth scopes requested at consent time.
        documentation_url: Official provider API documentation URL.
    """

    slug: str
    display_name: str
    capabilities: frozenset[StorageCapability] = field(default_factory=frozenset)
    required_settings: list[str] = field(default_factory=list)
    scopes: tuple[str, ...] = ()
    documentation_url: str | None = None


# =============================================================================
# Provider Catalog (Single Source of Truth)
# =============================================================================

STORAGE_PROVIDER_CATALOG: list[StorageProviderMetadata] = [
    StorageProviderMetadata(
        slug="google-drive",
        display_name="Google Drive",
        capabilities=frozenset(
            {
                StorageCapability.SEARCH,
                StorageCapability.THUMBNAIL,
                StorageCapability.BATCH_METADATA,
                StorageCapability.SHARED_DRIVES,
                StorageCapability.EXPORT,
            }
        ),
        required_settings=[
            "google_drive_client_id",
            "google_drive_client_secret",
            "google_drive_redirect_uri",
        ],
        scopes=(
            "https://www.googleapis.com/auth/drive.readonly",
            "https://www.googleapis.com/auth/userinfo.profile",
            "https://www.googleapis.com/auth/userinfo.email",
        ),
        documentation_url="https://developers.google.com/drive/api/reference/rest/v3",
    ),
    StorageProviderMetadata(
        slug="dropbox",
        display_name="Dropbox",
        capabilities=frozenset(
            {
                StorageCapability.SEARCH,
                StorageCapability.THUMBNAIL,
                StorageCapability.BATCH_METADATA,
                StorageCapability.PUBLIC_LINK,
            }
        ),
        required_settings=[
            "dropbox_client_id",
            "dropbox_client_secret",
            "dropbox_redirect_uri",
        ],
        scopes=(
            "files.metadata.read",
            "files.content.read",
            "account_info.read",
        ),
        documentation_url="https://www.dropbox.com/developers/documentation/http/documentation",
    ),
]


def get_provider_metadata(slug: str) -> StorageProviderMetadata | None:
    """Get metadata for a provider slug, None if unknown.

    Example:
        >>> get_provider_metadata("google-drive").display_name
        'Google Drive'
    """
    return next((p for p in STORAGE_PROVIDER_CATALOG if p.slug == slug), None)


def get_all_provider_slugs() -> list[str]:
    """List all provider slugs in catalog order."""
    return [p.slug for p in STORAGE_PROVIDER_CATALOG]
