"""Pytest configuration and shared test helpers.

This configuration ensures:
1. Settings can be loaded without a Docker-provided .env file
2. Every test gets fresh settings and container singletons
3. Domain entities and collaborators are built the same way everywhere

Helpers (import with ``from tests.conftest import ...``):
- make_settings(): Settings instance with test defaults
- create_credential(): StorageCredential with sensible defaults
- InMemoryCredentialRepository: StorageCredentialRepository backed by a dict
- create_provider_mock(): StorageProviderProtocol double with AsyncMock operations
- FakeDownloadedFile: in-memory DownloadedFile
- InMemoryCache: CacheProtocol backed by a dict
"""

import os
from dataclasses import replace
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from uuid_extensions import uuid7

# Required settings for code paths that call get_settings() directly
# (error responses, container factories). Set before any import of
# storagebridge.core.config so cached settings see them.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ENCRYPTION_KEY", "0123456789abcdef0123456789abcdef")

from storagebridge.core.config import Settings, get_settings  # noqa: E402
from storagebridge.core.result import Failure, Result, Success  # noqa: E402
from storagebridge.domain.entities import StorageCredential  # noqa: E402
from storagebridge.domain.enums import HealthStatus, StorageCapability  # noqa: E402
from storagebridge.domain.value_objects import CredentialTokenUpdate  # noqa: E402

TEST_ENCRYPTION_KEY = "0123456789abcdef0123456789abcdef"

# Sentinel for "use default expiration"
_DEFAULT_EXPIRY = object()


def make_settings(**overrides: Any) -> Settings:
    """Build Settings for tests without reading a .env file.

    Both providers are configured unless overridden with None.

    Usage:
        settings = make_settings()
        settings = make_settings(dropbox_client_id=None)  # Dropbox disabled
    """
    values: dict[str, Any] = {
        "environment": "testing",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "redis_url": "redis://localhost:6379/15",
        "encryption_key": TEST_ENCRYPTION_KEY,
        "backend_url": "https://api.example.com",
        "google_drive_client_id": "drive-client-id",
        "google_drive_client_secret": "drive-client-secret",
        "dropbox_client_id": "dropbox-app-key",
        "dropbox_client_secret": "dropbox-app-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def create_credential(
    *,
    owner_user_id: UUID | None = None,
    provider_slug: str = "dropbox",
    access_token_cipher: str = "access-cipher",
    refresh_token_cipher: str | None = "refresh-cipher",
    expires_at: datetime | None | object = _DEFAULT_EXPIRY,
    **fields: Any,
) -> StorageCredential:
    """Helper to create StorageCredential for testing.

    Args:
        owner_user_id: Owner (default: new random id).
        provider_slug: Provider registry key (default: dropbox).
        access_token_cipher: Stored access token ciphertext.
        refresh_token_cipher: Stored refresh token ciphertext (None = absent).
        expires_at: Expiration time.
            - Default: 1 hour from now
            - None: Never expires
            - datetime: Specific expiration time
        **fields: Any other StorageCredential field.

    Usage:
        credential = create_credential()
        expired = create_credential(expires_at=datetime.now(UTC) - timedelta(minutes=1))
    """
    if expires_at is _DEFAULT_EXPIRY:
        expires_at = datetime.now(UTC) + timedelta(hours=1)

    return StorageCredential(
        id=fields.pop("id", None) or uuid7(),
        owner_user_id=owner_user_id or uuid7(),
        provider_slug=provider_slug,
        access_token_cipher=access_token_cipher,
        refresh_token_cipher=refresh_token_cipher,
        expires_at=expires_at,  # type: ignore[arg-type]
        **fields,
    )


class InMemoryCredentialRepository:
    """Dict-backed StorageCredentialRepository for service tests.

    Records every token update and health change so tests can assert on
    persistence without a database.
    """

    def __init__(self, *credentials: StorageCredential) -> None:
        self.records: dict[UUID, StorageCredential] = {c.id: c for c in credentials}
        self.token_updates: list[tuple[UUID, CredentialTokenUpdate]] = []
        self.health_updates: list[tuple[UUID, HealthStatus]] = []
        self.saved: list[StorageCredential] = []

    async def find_by_id(self, credential_id: UUID) -> StorageCredential | None:
        record = self.records.get(credential_id)
        if record is None or record.is_deleted():
            return None
        return record

    async def find_for_owner(
        self, credential_id: UUID, owner_user_id: UUID
    ) -> StorageCredential | None:
        record = await self.find_by_id(credential_id)
        if record is None or record.owner_user_id != owner_user_id:
            return None
        return record

    async def list_for_owner(self, owner_user_id: UUID) -> list[StorageCredential]:
        return [
            c
            for c in self.records.values()
            if c.owner_user_id == owner_user_id and not c.is_deleted()
        ]

    async def save(self, credential: StorageCredential) -> None:
        self.records[credential.id] = credential
        self.saved.append(credential)

    async def update_tokens(
        self, credential_id: UUID, token_update: CredentialTokenUpdate
    ) -> None:
        self.token_updates.append((credential_id, token_update))
        record = self.records[credential_id]
        self.records[credential_id] = replace(
            record,
            access_token_cipher=token_update.access_token_cipher,
            refresh_token_cipher=token_update.refresh_token_cipher,
            expires_at=token_update.expires_at,
            health_status=HealthStatus.HEALTHY,
        )

    async def set_health_status(
        self, credential_id: UUID, health_status: HealthStatus
    ) -> None:
        self.health_updates.append((credential_id, health_status))
        record = self.records[credential_id]
        self.records[credential_id] = replace(record, health_status=health_status)

    async def soft_delete(self, credential_id: UUID, deleted_at: datetime) -> bool:
        record = self.records.get(credential_id)
        if record is None or record.is_deleted():
            return False
        self.records[credential_id] = replace(record, deleted_at=deleted_at)
        return True


ASYNC_PROVIDER_OPERATIONS = (
    "exchange_code",
    "refresh",
    "list_files",
    "get_file",
    "download",
    "get_download_url",
    "search_files",
    "get_thumbnail",
    "batch_get_files",
    "list_shared_drives",
    "export_file",
    "create_public_link",
)


def create_provider_mock(
    slug: str = "dropbox",
    capabilities: frozenset[StorageCapability] = frozenset(),
    *,
    is_configured: bool = True,
) -> MagicMock:
    """Storage adapter double; every async operation is an AsyncMock.

    Usage:
        provider = create_provider_mock("google-drive", frozenset({SEARCH}))
        provider.refresh.return_value = Success(value=auth_result)
    """
    provider = MagicMock()
    provider.slug = slug
    provider.display_name = slug.replace("-", " ").title()
    provider.is_configured = is_configured
    provider.capabilities = capabilities
    for operation in ASYNC_PROVIDER_OPERATIONS:
        setattr(provider, operation, AsyncMock(name=operation))
    return provider


class FakeDownloadedFile:
    """In-memory DownloadedFile; records whether it was closed."""

    def __init__(
        self,
        content: bytes = b"media-bytes",
        *,
        filename: str = "photo.jpg",
        mime_type: str = "image/jpeg",
        save_error: Failure | None = None,
    ) -> None:
        self.content = content
        self.filename = filename
        self.mime_type = mime_type
        self.save_error = save_error
        self.closed = False

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        yield self.content

    async def save_to(self, destination: Path) -> Result[int, Any]:
        if self.save_error is not None:
            return self.save_error
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.content)
        return Success(value=len(self.content))

    async def aclose(self) -> None:
        self.closed = True


class InMemoryCache:
    """Minimal CacheProtocol backed by a dict (TTL recorded, not enforced)."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> Result[str | None, Any]:
        return Success(value=self.values.get(key))

    async def set(
        self, key: str, value: str, ttl: int | None = None
    ) -> Result[None, Any]:
        self.values[key] = value
        self.ttls[key] = ttl
        return Success(value=None)

    async def delete(self, key: str) -> Result[bool, Any]:
        return Success(value=self.values.pop(key, None) is not None)

    async def get_and_delete(self, key: str) -> Result[str | None, Any]:
        return Success(value=self.values.pop(key, None))

    async def ping(self) -> Result[bool, Any]:
        return Success(value=True)


@pytest.fixture
def mock_logger():
    """Create mock logger."""
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings and container singletons between tests."""
    from storagebridge.core.container import (
        get_credential_locks,
        get_encryption_service,
        get_storage_registry,
    )

    get_settings.cache_clear()
    get_storage_registry.cache_clear()
    get_encryption_service.cache_clear()
    get_credential_locks.cache_clear()
    yield
    get_settings.cache_clear()
    get_storage_registry.cache_clear()
    get_encryption_service.cache_clear()
    get_credential_locks.cache_clear()


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with a real (SQLite) database"
    )
