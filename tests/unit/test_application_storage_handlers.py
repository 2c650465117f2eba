"""Tests for storage command and query handlers.

Covers:
- BeginStorageConnect: consent URL + state remembered for the user
- ConnectStorage: one-time state, code exchange, encryption, reconnect reuse
- DisconnectStorage: owner-scoped soft delete
- ListStorageIntegrations: owner-scoped DTOs without token material
- File browsing queries: capability gating and owner scoping
- Download URL, batch metadata, shared drives and export queries
- Import commands: temp copies, per-file batch outcomes

Reference:
    - storagebridge/application/commands/handlers/
    - storagebridge/application/queries/handlers/
"""

from dataclasses import fields
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from uuid_extensions import uuid7

from storagebridge.application.commands.handlers import (
    BatchImportStorageFilesHandler,
    BeginStorageConnectHandler,
    ConnectStorageHandler,
    DisconnectStorageHandler,
    ImportStorageFileHandler,
)
from storagebridge.application.commands.storage_commands import (
    BatchImportStorageFiles,
    BeginStorageConnect,
    ConnectStorage,
    DisconnectStorage,
    ImportStorageFile,
)
from storagebridge.application.queries.handlers import (
    ExportStorageFileHandler,
    GetStorageDownloadUrlHandler,
    GetStorageFilesBatchHandler,
    GetStorageThumbnailHandler,
    ListSharedDrivesHandler,
    ListStorageFilesHandler,
    ListStorageIntegrationsHandler,
    SearchStorageFilesHandler,
)
from storagebridge.application.queries.handlers.list_integrations_handler import (
    StorageIntegrationResult,
)
from storagebridge.application.queries.storage_queries import (
    ExportStorageFile,
    GetStorageDownloadUrl,
    GetStorageFilesBatch,
    GetStorageThumbnail,
    ListSharedDrives,
    ListStorageFiles,
    ListStorageIntegrations,
    SearchStorageFiles,
)
from storagebridge.application.services.credential_locks import CredentialLockRegistry
from storagebridge.application.services.token_lifecycle import TokenLifecycleManager
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Success
from storagebridge.domain.enums import HealthStatus, StorageCapability
from storagebridge.domain.errors import (
    CapabilityNotSupportedError,
    IntegrationNotFoundError,
    OAuthStateNotFoundError,
    ProviderAuthenticationError,
    ProviderNotConfiguredError,
    ProviderNotFoundError,
    StorageFileNotFoundError,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    AuthorizationRequest,
    FileListing,
    SearchOptions,
    SharedDrive,
    StorageAuthResult,
    StorageFile,
    StorageQuota,
)
from storagebridge.infrastructure.cache import CacheKeys, OAuthStateCache
from storagebridge.infrastructure.providers.encryption_service import (
    EncryptionService,
)
from storagebridge.infrastructure.providers.provider_registry import (
    StorageProviderRegistry,
)
from storagebridge.infrastructure.storage import LocalMediaFilesystem
from tests.conftest import (
    TEST_ENCRYPTION_KEY,
    FakeDownloadedFile,
    InMemoryCache,
    InMemoryCredentialRepository,
    create_credential,
    create_provider_mock,
)

OWNER_ID = uuid7()


@pytest.fixture
def encryption() -> EncryptionService:
    result = EncryptionService.create(TEST_ENCRYPTION_KEY.encode())
    assert isinstance(result, Success)
    return result.value


@pytest.fixture
def provider():
    return create_provider_mock("dropbox")


@pytest.fixture
def registry(provider) -> StorageProviderRegistry:
    registry = StorageProviderRegistry()
    registry.register("dropbox", provider)
    return registry


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def state_cache(cache) -> OAuthStateCache:
    return OAuthStateCache(cache=cache, cache_keys=CacheKeys(prefix="test"))


def auth_result(**overrides) -> StorageAuthResult:
    values = {
        "access_token": "access-token",
        "refresh_token": "refresh-token",
        "expires_in": 14400,
        "external_account_id": "dbid:AAA",
        "email": "user@example.com",
        "display_name": "Test User",
        "quota": StorageQuota(used_bytes=10, total_bytes=100),
    }
    values.update(overrides)
    return StorageAuthResult(**values)


# =============================================================================
# BeginStorageConnect
# =============================================================================


@pytest.mark.unit
class TestBeginStorageConnectHandler:
    """Test starting the consent flow."""

    async def test_returns_url_and_remembers_state(
        self, registry, provider, state_cache, cache, mock_logger
    ):
        """Test the state is stored against the requesting user."""
        provider.begin_auth.return_value = Success(
            value=AuthorizationRequest(
                authorization_url="https://www.dropbox.com/oauth2/authorize?state=s1",
                state="s1",
            )
        )
        handler = BeginStorageConnectHandler(registry, state_cache, mock_logger)

        result = await handler.handle(
            BeginStorageConnect(owner_user_id=OWNER_ID, provider_slug="dropbox")
        )

        assert isinstance(result, Success)
        assert result.value.state == "s1"
        assert cache.values == {"test:oauth:storage:state:s1": str(OWNER_ID)}

    async def test_unknown_provider(self, registry, state_cache, cache, mock_logger):
        handler = BeginStorageConnectHandler(registry, state_cache, mock_logger)

        result = await handler.handle(
            BeginStorageConnect(owner_user_id=OWNER_ID, provider_slug="onedrive")
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderNotFoundError)
        assert cache.values == {}

    async def test_unconfigured_provider(
        self, registry, provider, state_cache, cache, mock_logger
    ):
        """Test a provider without deployment credentials fails without a state."""
        provider.begin_auth.return_value = Failure(
            error=ProviderNotConfiguredError(
                code=ErrorCode.PROVIDER_NOT_CONFIGURED,
                message="Dropbox is not configured",
                provider_name="dropbox",
            )
        )
        handler = BeginStorageConnectHandler(registry, state_cache, mock_logger)

        result = await handler.handle(
            BeginStorageConnect(owner_user_id=OWNER_ID, provider_slug="dropbox")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_NOT_CONFIGURED
        assert cache.values == {}


# =============================================================================
# ConnectStorage
# =============================================================================


@pytest.mark.unit
class TestConnectStorageHandler:
    """Test completing the OAuth flow."""

    @pytest.fixture
    def repo(self) -> InMemoryCredentialRepository:
        return InMemoryCredentialRepository()

    @pytest.fixture
    def handler(
        self, registry, state_cache, encryption, repo, mock_logger
    ) -> ConnectStorageHandler:
        return ConnectStorageHandler(
            registry, state_cache, encryption, repo, mock_logger
        )

    async def test_stores_encrypted_credential(
        self, handler, provider, state_cache, encryption, repo
    ):
        """Test tokens are encrypted and the profile is copied."""
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(value=auth_result())
        before = datetime.now(UTC)

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")
        )

        assert isinstance(result, Success)
        credential = result.value
        assert credential.owner_user_id == OWNER_ID
        assert credential.provider_slug == "dropbox"
        assert credential.access_token_cipher != "access-token"
        assert encryption.decrypt(credential.access_token_cipher) == Success(
            value="access-token"
        )
        assert encryption.decrypt(credential.refresh_token_cipher) == Success(
            value="refresh-token"
        )
        assert credential.expires_at is not None
        assert credential.expires_at >= before + timedelta(seconds=14400)
        assert credential.external_account_id == "dbid:AAA"
        assert credential.email == "user@example.com"
        assert credential.quota_total_bytes == 100
        assert credential.health_status == HealthStatus.HEALTHY
        assert repo.saved == [credential]
        provider.exchange_code.assert_awaited_once_with("auth-code")

    async def test_state_is_single_use(self, handler, provider, state_cache):
        """Test replaying a callback with the same state fails."""
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(value=auth_result())
        command = ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")

        first = await handler.handle(command)
        second = await handler.handle(command)

        assert isinstance(first, Success)
        assert isinstance(second, Failure)
        assert isinstance(second.error, OAuthStateNotFoundError)
        assert provider.exchange_code.await_count == 1

    async def test_unknown_state_skips_exchange(self, handler, provider, repo):
        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="forged")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.OAUTH_STATE_NOT_FOUND
        provider.exchange_code.assert_not_awaited()
        assert repo.saved == []

    async def test_reconnect_reuses_record(self, handler, provider, state_cache, repo):
        """Test reconnecting the same account overwrites the existing record."""
        existing = create_credential(
            owner_user_id=OWNER_ID,
            provider_slug="dropbox",
            external_account_id="dbid:AAA",
            health_status=HealthStatus.NEEDS_REAUTH,
        )
        repo.records[existing.id] = existing
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(value=auth_result())

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")
        )

        assert isinstance(result, Success)
        assert result.value.id == existing.id
        assert result.value.created_at == existing.created_at
        assert result.value.health_status == HealthStatus.HEALTHY
        assert len(repo.records) == 1

    async def test_reconnect_without_refresh_token_keeps_stored_one(
        self, handler, provider, state_cache, encryption, repo
    ):
        """Test a repeat consent that omits refresh_token keeps the old one."""
        existing = create_credential(
            owner_user_id=OWNER_ID,
            provider_slug="dropbox",
            external_account_id="dbid:AAA",
            refresh_token_cipher=encryption.encrypt("stored-refresh").value,
        )
        repo.records[existing.id] = existing
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(
            value=auth_result(access_token="fresh-access", refresh_token="")
        )

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")
        )

        assert isinstance(result, Success)
        assert result.value.id == existing.id
        assert result.value.refresh_token_cipher == existing.refresh_token_cipher
        assert encryption.decrypt(result.value.refresh_token_cipher) == Success(
            value="stored-refresh"
        )
        assert encryption.decrypt(result.value.access_token_cipher) == Success(
            value="fresh-access"
        )

    async def test_reconnect_with_new_refresh_token_replaces_it(
        self, handler, provider, state_cache, encryption, repo
    ):
        existing = create_credential(
            owner_user_id=OWNER_ID,
            provider_slug="dropbox",
            external_account_id="dbid:AAA",
            refresh_token_cipher=encryption.encrypt("stored-refresh").value,
        )
        repo.records[existing.id] = existing
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(
            value=auth_result(refresh_token="rotated-refresh")
        )

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")
        )

        assert isinstance(result, Success)
        assert encryption.decrypt(result.value.refresh_token_cipher) == Success(
            value="rotated-refresh"
        )

    async def test_different_account_creates_new_record(
        self, handler, provider, state_cache, repo
    ):
        existing = create_credential(
            owner_user_id=OWNER_ID, external_account_id="dbid:OTHER"
        )
        repo.records[existing.id] = existing
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(value=auth_result())

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")
        )

        assert isinstance(result, Success)
        assert result.value.id != existing.id
        assert len(repo.records) == 2

    async def test_missing_refresh_token_stored_as_none(
        self, handler, provider, state_cache
    ):
        """Test a grant without refresh token and expiry is stored as such."""
        await state_cache.put("s1", str(OWNER_ID))
        provider.exchange_code.return_value = Success(
            value=auth_result(refresh_token="", expires_in=None)
        )

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="auth-code", state="s1")
        )

        assert isinstance(result, Success)
        assert result.value.refresh_token_cipher is None
        assert result.value.expires_at is None

    async def test_exchange_failure_returned(self, handler, provider, state_cache, repo):
        """Test a rejected code is returned and nothing is stored."""
        await state_cache.put("s1", str(OWNER_ID))
        error = ProviderAuthenticationError(
            code=ErrorCode.PROVIDER_AUTHENTICATION_FAILED,
            message="invalid_grant",
            provider_name="dropbox",
        )
        provider.exchange_code.return_value = Failure(error=error)

        result = await handler.handle(
            ConnectStorage(provider_slug="dropbox", code="bad", state="s1")
        )

        assert isinstance(result, Failure)
        assert result.error is error
        assert repo.saved == []


# =============================================================================
# DisconnectStorage
# =============================================================================


@pytest.mark.unit
class TestDisconnectStorageHandler:
    """Test owner-scoped soft delete."""

    async def test_disconnect_soft_deletes(self, mock_logger):
        credential = create_credential(owner_user_id=OWNER_ID)
        repo = InMemoryCredentialRepository(credential)
        handler = DisconnectStorageHandler(repo, mock_logger)

        result = await handler.handle(
            DisconnectStorage(credential_id=credential.id, owner_user_id=OWNER_ID)
        )

        assert result == Success(value=None)
        assert repo.records[credential.id].is_deleted()

    async def test_foreign_credential_not_found(self, mock_logger):
        """Test another user's credential cannot be disconnected."""
        credential = create_credential(owner_user_id=OWNER_ID)
        repo = InMemoryCredentialRepository(credential)
        handler = DisconnectStorageHandler(repo, mock_logger)

        result = await handler.handle(
            DisconnectStorage(credential_id=credential.id, owner_user_id=uuid7())
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, IntegrationNotFoundError)
        assert not repo.records[credential.id].is_deleted()

    async def test_second_disconnect_not_found(self, mock_logger):
        credential = create_credential(owner_user_id=OWNER_ID)
        handler = DisconnectStorageHandler(
            InMemoryCredentialRepository(credential), mock_logger
        )
        command = DisconnectStorage(credential_id=credential.id, owner_user_id=OWNER_ID)

        await handler.handle(command)
        result = await handler.handle(command)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INTEGRATION_NOT_FOUND


# =============================================================================
# ListStorageIntegrations
# =============================================================================


@pytest.mark.unit
class TestListStorageIntegrationsHandler:
    """Test listing a user's integrations."""

    async def test_lists_only_owned_integrations(self):
        mine = create_credential(owner_user_id=OWNER_ID, display_name="Mine")
        theirs = create_credential(owner_user_id=uuid7())
        handler = ListStorageIntegrationsHandler(
            InMemoryCredentialRepository(mine, theirs)
        )

        result = await handler.handle(ListStorageIntegrations(owner_user_id=OWNER_ID))

        assert isinstance(result, Success)
        assert [r.id for r in result.value] == [mine.id]
        assert result.value[0].display_name == "Mine"
        assert result.value[0].health_status == "healthy"

    def test_result_carries_no_token_material(self):
        """Test the DTO has no cipher fields."""
        names = {f.name for f in fields(StorageIntegrationResult)}

        assert not any("token" in name or "cipher" in name for name in names)


# =============================================================================
# File browsing queries
# =============================================================================


@pytest.mark.unit
class TestStorageFileQueries:
    """Test list, search and thumbnail queries."""

    @pytest.fixture
    def credential(self, encryption):
        return create_credential(
            owner_user_id=OWNER_ID,
            access_token_cipher=encryption.encrypt("access-token").value,
            expires_at=datetime.now(UTC) + timedelta(hours=1),
        )

    @pytest.fixture
    def handler_args(self, credential, encryption, registry, mock_logger):
        repo = InMemoryCredentialRepository(credential)
        token_manager = TokenLifecycleManager(
            credential_repo=repo,
            encryption=encryption,
            providers=registry,
            locks=CredentialLockRegistry(),
            logger=mock_logger,
        )
        return repo, token_manager, registry

    async def test_list_files(self, handler_args, provider, credential):
        """Test listing passes the decrypted token and paging arguments."""
        listing = FileListing(
            files=[StorageFile(id="id:1", name="a.jpg", mime_type="image/jpeg")],
            next_page_token="cursor-2",
        )
        provider.list_files.return_value = Success(value=listing)
        handler = ListStorageFilesHandler(*handler_args)

        result = await handler.handle(
            ListStorageFiles(
                credential_id=credential.id,
                owner_user_id=OWNER_ID,
                folder_id="/photos",
                page_token="cursor-1",
            )
        )

        assert result == Success(value=listing)
        provider.list_files.assert_awaited_once_with(
            "access-token", folder_id="/photos", page_token="cursor-1"
        )

    async def test_list_files_foreign_owner(self, handler_args, provider, credential):
        handler = ListStorageFilesHandler(*handler_args)

        result = await handler.handle(
            ListStorageFiles(credential_id=credential.id, owner_user_id=uuid7())
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, IntegrationNotFoundError)
        provider.list_files.assert_not_awaited()

    async def test_search_requires_capability(self, handler_args, provider, credential):
        """Test search on a provider without SEARCH is rejected up front."""
        handler = SearchStorageFilesHandler(*handler_args)

        result = await handler.handle(
            SearchStorageFiles(
                credential_id=credential.id, owner_user_id=OWNER_ID, query="cat"
            )
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, CapabilityNotSupportedError)
        assert result.error.capability == StorageCapability.SEARCH
        assert result.error.code == ErrorCode.STORAGE_CAPABILITY_NOT_SUPPORTED
        provider.search_files.assert_not_awaited()

    async def test_search_builds_options(self, handler_args, provider, credential):
        provider.capabilities = frozenset({StorageCapability.SEARCH})
        provider.search_files.return_value = Success(value=FileListing())
        handler = SearchStorageFilesHandler(*handler_args)

        await handler.handle(
            SearchStorageFiles(
                credential_id=credential.id,
                owner_user_id=OWNER_ID,
                query="cat",
                mime_type="image/jpeg",
                page_size=10,
            )
        )

        provider.search_files.assert_awaited_once_with(
            "access-token",
            SearchOptions(query="cat", mime_type="image/jpeg", page_size=10),
        )

    async def test_thumbnail(self, handler_args, provider, credential):
        """Test the thumbnail URL is returned as given by the provider."""
        provider.capabilities = frozenset({StorageCapability.THUMBNAIL})
        provider.get_thumbnail.return_value = Success(value=None)
        handler = GetStorageThumbnailHandler(*handler_args)

        result = await handler.handle(
            GetStorageThumbnail(
                credential_id=credential.id,
                owner_user_id=OWNER_ID,
                file_id="id:1",
                size=512,
            )
        )

        assert result == Success(value=None)
        provider.get_thumbnail.assert_awaited_once_with("access-token", "id:1", 512)


# =============================================================================
# Download URL, batch metadata, shared drives and export
# =============================================================================


def file_not_found(file_id: str) -> Failure:
    return Failure(
        error=StorageFileNotFoundError(
            code=ErrorCode.STORAGE_FILE_NOT_FOUND,
            message="File not found",
            provider_name="dropbox",
            file_id=file_id,
        )
    )


@pytest.fixture
def owned_credential(encryption):
    return create_credential(
        owner_user_id=OWNER_ID,
        access_token_cipher=encryption.encrypt("access-token").value,
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )


@pytest.fixture
def owned_repo(owned_credential) -> InMemoryCredentialRepository:
    return InMemoryCredentialRepository(owned_credential)


@pytest.fixture
def token_manager(owned_repo, encryption, registry, mock_logger):
    return TokenLifecycleManager(
        credential_repo=owned_repo,
        encryption=encryption,
        providers=registry,
        locks=CredentialLockRegistry(),
        logger=mock_logger,
    )


@pytest.fixture
def scoped_args(owned_repo, token_manager, registry):
    return owned_repo, token_manager, registry


@pytest.mark.unit
class TestStorageFileExtraQueries:
    """Test the download URL, batch, shared drive and export queries."""

    async def test_download_url(self, scoped_args, provider, owned_credential):
        provider.get_download_url.return_value = Success(
            value="https://dl.dropboxusercontent.com/apitl/1/abc"
        )
        handler = GetStorageDownloadUrlHandler(*scoped_args)

        result = await handler.handle(
            GetStorageDownloadUrl(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_id="id:1",
            )
        )

        assert result == Success(value="https://dl.dropboxusercontent.com/apitl/1/abc")
        provider.get_download_url.assert_awaited_once_with("access-token", "id:1")

    async def test_download_url_foreign_owner(
        self, scoped_args, provider, owned_credential
    ):
        handler = GetStorageDownloadUrlHandler(*scoped_args)

        result = await handler.handle(
            GetStorageDownloadUrl(
                credential_id=owned_credential.id, owner_user_id=uuid7(), file_id="x"
            )
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, IntegrationNotFoundError)
        provider.get_download_url.assert_not_awaited()

    async def test_files_batch(self, scoped_args, provider, owned_credential):
        """Test batch metadata passes the ids through in order."""
        provider.capabilities = frozenset({StorageCapability.BATCH_METADATA})
        files = [StorageFile(id="id:1", name="a.jpg"), StorageFile(id="id:2", name="b")]
        provider.batch_get_files.return_value = Success(value=files)
        handler = GetStorageFilesBatchHandler(*scoped_args)

        result = await handler.handle(
            GetStorageFilesBatch(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_ids=("id:1", "id:2"),
            )
        )

        assert result == Success(value=files)
        provider.batch_get_files.assert_awaited_once_with(
            "access-token", ["id:1", "id:2"]
        )

    async def test_files_batch_requires_capability(
        self, scoped_args, provider, owned_credential
    ):
        handler = GetStorageFilesBatchHandler(*scoped_args)

        result = await handler.handle(
            GetStorageFilesBatch(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_ids=("id:1",),
            )
        )

        assert isinstance(result, Failure)
        assert result.error.capability == StorageCapability.BATCH_METADATA
        provider.batch_get_files.assert_not_awaited()

    async def test_shared_drives(self, scoped_args, provider, owned_credential):
        provider.capabilities = frozenset({StorageCapability.SHARED_DRIVES})
        drives = [SharedDrive(id="0AB", name="Marketing")]
        provider.list_shared_drives.return_value = Success(value=drives)
        handler = ListSharedDrivesHandler(*scoped_args)

        result = await handler.handle(
            ListSharedDrives(credential_id=owned_credential.id, owner_user_id=OWNER_ID)
        )

        assert result == Success(value=drives)
        provider.list_shared_drives.assert_awaited_once_with("access-token")

    async def test_shared_drives_not_supported(
        self, scoped_args, provider, owned_credential
    ):
        """Test a provider without shared drives is rejected before any call."""
        handler = ListSharedDrivesHandler(*scoped_args)

        result = await handler.handle(
            ListSharedDrives(credential_id=owned_credential.id, owner_user_id=OWNER_ID)
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, CapabilityNotSupportedError)
        assert result.error.capability == StorageCapability.SHARED_DRIVES
        assert result.error.operation == "list_shared_drives"
        provider.list_shared_drives.assert_not_awaited()

    async def test_export(self, scoped_args, provider, owned_credential):
        provider.capabilities = frozenset({StorageCapability.EXPORT})
        exported = FakeDownloadedFile(
            b"%PDF", filename="Notes.pdf", mime_type="application/pdf"
        )
        provider.export_file.return_value = Success(value=exported)
        handler = ExportStorageFileHandler(*scoped_args)

        result = await handler.handle(
            ExportStorageFile(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_id="doc-1",
                export_format="pdf",
            )
        )

        assert result == Success(value=exported)
        provider.export_file.assert_awaited_once_with("access-token", "doc-1", "pdf")

    async def test_export_not_supported(self, scoped_args, provider, owned_credential):
        handler = ExportStorageFileHandler(*scoped_args)

        result = await handler.handle(
            ExportStorageFile(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_id="doc-1",
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.STORAGE_CAPABILITY_NOT_SUPPORTED
        provider.export_file.assert_not_awaited()


# =============================================================================
# Import commands
# =============================================================================


@pytest.mark.unit
class TestImportHandlers:
    """Test importing provider files into the temp directory."""

    @pytest.fixture
    def temp_dir(self, tmp_path: Path) -> Path:
        path = tmp_path / "tmp"
        path.mkdir()
        return path

    @pytest.fixture
    def import_args(self, scoped_args, temp_dir, mock_logger):
        return (*scoped_args, LocalMediaFilesystem(temp_dir=temp_dir), mock_logger)

    async def test_import_writes_temp_file(
        self, import_args, provider, owned_credential, temp_dir
    ):
        download = FakeDownloadedFile(b"jpeg-bytes", filename="Beach Day.jpg")
        provider.download.return_value = Success(value=download)
        handler = ImportStorageFileHandler(*import_args)

        result = await handler.handle(
            ImportStorageFile(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_id="id:1",
            )
        )

        assert isinstance(result, Success)
        imported = result.value
        assert imported.file_id == "id:1"
        assert imported.path.parent == temp_dir
        assert imported.path.name.endswith("-Beach_Day.jpg")
        assert imported.path.read_bytes() == b"jpeg-bytes"
        assert imported.filename == "Beach Day.jpg"
        assert imported.mime_type == "image/jpeg"
        assert imported.size_bytes == len(b"jpeg-bytes")
        assert download.closed is True
        provider.download.assert_awaited_once_with("access-token", "id:1")

    async def test_import_failure_leaves_nothing(
        self, import_args, provider, owned_credential, temp_dir
    ):
        """Test a failed write removes the temp file and returns the error."""
        error = file_not_found("id:1")
        download = FakeDownloadedFile(save_error=error)
        provider.download.return_value = Success(value=download)
        handler = ImportStorageFileHandler(*import_args)

        result = await handler.handle(
            ImportStorageFile(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_id="id:1",
            )
        )

        assert result is error
        assert download.closed is True
        assert list(temp_dir.iterdir()) == []

    async def test_import_foreign_owner(self, import_args, provider, owned_credential):
        handler = ImportStorageFileHandler(*import_args)

        result = await handler.handle(
            ImportStorageFile(
                credential_id=owned_credential.id, owner_user_id=uuid7(), file_id="x"
            )
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, IntegrationNotFoundError)
        provider.download.assert_not_awaited()

    async def test_batch_import_reports_each_file(
        self, import_args, provider, owned_credential, temp_dir
    ):
        """Test one missing file does not discard the others."""

        async def download(access_token: str, file_id: str):
            if file_id == "id:missing":
                return file_not_found(file_id)
            return Success(value=FakeDownloadedFile(filename=f"{file_id[3:]}.jpg"))

        provider.download.side_effect = download
        handler = BatchImportStorageFilesHandler(*import_args)

        result = await handler.handle(
            BatchImportStorageFiles(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_ids=("id:a", "id:missing", "id:b"),
            )
        )

        assert isinstance(result, Success)
        first, missing, last = result.value
        assert [item.file_id for item in result.value] == [
            "id:a",
            "id:missing",
            "id:b",
        ]
        assert first.success and last.success
        assert first.imported.path.name.endswith("-a.jpg")
        assert last.imported.path.exists()
        assert missing.success is False
        assert missing.imported is None
        assert missing.error.code == ErrorCode.STORAGE_FILE_NOT_FOUND
        assert len(list(temp_dir.iterdir())) == 2

    async def test_batch_import_unusable_integration(
        self, import_args, provider, owned_credential
    ):
        """Test a disabled integration fails the whole batch up front."""
        owned_credential.disabled = True
        handler = BatchImportStorageFilesHandler(*import_args)

        result = await handler.handle(
            BatchImportStorageFiles(
                credential_id=owned_credential.id,
                owner_user_id=OWNER_ID,
                file_ids=("id:a",),
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INTEGRATION_NOT_FOUND
        provider.download.assert_not_awaited()
