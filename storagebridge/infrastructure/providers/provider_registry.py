"""Storage provider registry.

Runtime map from provider slug to adapter instance. Built once at startup
by the container (storagebridge/core/container/providers.py) and shared
for the life of the process; registration after startup is not supported.

Architecture:
- Infrastructure layer implementation
- Resolves StorageProviderProtocol adapters by slug
- Used as app-scoped singleton via get_storage_registry()
"""

from dataclasses import dataclass

from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.enums import StorageCapability
from storagebridge.domain.errors import ProviderNotFoundError
from storagebridge.domain.protocols.storage_provider_protocol import (
    StorageProviderProtocol,
)


@dataclass(frozen=True, kw_only=True)
class ProviderSummary:
    """Public description of a registered adapter.

    Attributes:
        slug: Provider identifier.
        display_name: Human-readable name.
        is_configured: Whether the deployment has credentials for it.
        capabilities: Optional operations the adapter implements.
    """

    slug: str
    display_name: str
    is_configured: bool
    capabilities: frozenset[StorageCapability]


class StorageProviderRegistry:
    """Slug → adapter lookup.

    Example:
        >>> registry = StorageProviderRegistry()
        >>> registry.register("dropbox", DropboxProvider(settings=settings))
        >>> match registry.get("dropbox"):
        ...     case Success(value=adapter):
        ...         ...
    """

    def __init__(self) -> None:
        self._adapters: dict[str, StorageProviderProtocol] = {}

    def register(self, slug: str, adapter: StorageProviderProtocol) -> None:
        """Register an adapter under ``slug``.

        Raises:
            ValueError: If ``slug`` is already registered.
        """
        if slug in self._adapters:
            raise ValueError(f"Storage provider '{slug}' is already registered")
        self._adapters[slug] = adapter

    def get(self, slug: str) -> Result[StorageProviderProtocol, ProviderNotFoundError]:
        adapter = self._adapters.get(slug)
        if adapter is None:
            return Failure(
                error=ProviderNotFoundError(
                    code=ErrorCode.PROVIDER_NOT_FOUND,
                    message=f"Unknown storage provider: {slug}",
                    resource_id=slug,
                )
            )
        return Success(value=adapter)

    def list_providers(self) -> list[ProviderSummary]:
        """Summaries of all registered adapters, in registration order."""
        return [
            ProviderSummary(
                slug=slug,
                display_name=adapter.display_name,
                is_configured=adapter.is_configured,
                capabilities=adapter.capabilities,
            )
            for slug, adapter in self._adapters.items()
        ]

    def __contains__(self, slug: object) -> bool:
        return slug in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
