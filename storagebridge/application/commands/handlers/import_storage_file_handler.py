"""ImportStorageFile and BatchImportStorageFiles command handlers.

Download files from a connected drive into the media temp directory so
they can be attached to a draft. The caller owns the imported files.

A single import either succeeds or leaves nothing behind. A batch import
reports each file separately; files that fail do not discard the ones
that succeeded.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from storagebridge.application.commands.storage_commands import (
    BatchImportStorageFiles,
    ImportStorageFile,
)
from storagebridge.application.queries.handlers.storage_file_handlers import (
    IntegrationScopedHandler,
)
from storagebridge.application.services.media_resolver import sanitize_filename
from storagebridge.application.services.token_lifecycle import TokenLifecycleManager
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.protocols.logger_protocol import LoggerProtocol
from storagebridge.domain.protocols.media_filesystem_protocol import (
    MediaFilesystemProtocol,
)
from storagebridge.domain.protocols.storage_credential_repository import (
    StorageCredentialRepository,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    StorageProviderLookup,
    StorageProviderProtocol,
)


@dataclass(frozen=True, kw_only=True)
class ImportedFile:
    """A provider file copied into the temp directory."""

    file_id: str
    path: Path
    filename: str
    mime_type: str
    size_bytes: int


@dataclass(frozen=True, kw_only=True)
class BatchImportItem:
    """Outcome for one file of a batch import.

    Exactly one of ``imported`` and ``error`` is set.
    """

    file_id: str
    imported: ImportedFile | None = None
    error: DomainError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class _ImportHandlerBase(IntegrationScopedHandler):
    """Owner-scoped lookup plus the download-to-temp step."""

    def __init__(
        self,
        credential_repo: StorageCredentialRepository,
        token_manager: TokenLifecycleManager,
        providers: StorageProviderLookup,
        filesystem: MediaFilesystemProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(credential_repo, token_manager, providers)
        self._filesystem = filesystem
        self._logger = logger

    async def _import(
        self, adapter: StorageProviderProtocol, access_token: str, file_id: str
    ) -> Result[ImportedFile, DomainError]:
        download_result = await adapter.download(access_token, file_id)
        if isinstance(download_result, Failure):
            return download_result
        download = download_result.value

        temp_path = self._filesystem.temp_path(
            sanitize_filename(download.filename, file_id)
        )
        try:
            saved = await download.save_to(temp_path)
        finally:
            await download.aclose()

        if isinstance(saved, Failure):
            try:
                self._filesystem.delete(temp_path)
            except OSError as e:
                self._logger.warning(
                    "storage_import_temp_delete_failed",
                    path=str(temp_path),
                    error=str(e),
                )
            self._logger.warning(
                "storage_import_failed",
                provider=adapter.slug,
                file_id=file_id,
                error_code=saved.error.code.value,
            )
            return saved

        return Success(
            value=ImportedFile(
                file_id=file_id,
                path=temp_path,
                filename=download.filename,
                mime_type=download.mime_type,
                size_bytes=saved.value,
            )
        )


class ImportStorageFileHandler(_ImportHandlerBase):
    """Handler for ImportStorageFile command.

    Dependencies (injected via constructor):
        - StorageCredentialRepository: Owner-scoped credential lookup
        - TokenLifecycleManager: Valid access token
        - StorageProviderLookup: Adapter per provider slug
        - MediaFilesystemProtocol: Temp directory
        - LoggerProtocol: Structured logging
    """

    async def handle(
        self, cmd: ImportStorageFile
    ) -> Result[ImportedFile, DomainError]:
        """Import one file.

        Returns:
            Success(ImportedFile): File written to the temp directory.
            Failure(IntegrationNotFoundError): Not owned, disabled or deleted.
            Failure(ReauthRequiredError | ProviderError): Token or download
                failure.
            Failure(MediaResolutionError): Local write failed.
        """
        opened = await self._open(cmd.credential_id, cmd.owner_user_id)
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value

        result = await self._import(adapter, access_token, cmd.file_id)
        if isinstance(result, Success):
            self._logger.info(
                "storage_file_imported",
                provider=adapter.slug,
                credential_id=str(cmd.credential_id),
                file_id=cmd.file_id,
                bytes=result.value.size_bytes,
            )
        return result


class BatchImportStorageFilesHandler(_ImportHandlerBase):
    """Handler for BatchImportStorageFiles command.

    Resolves the integration and token once, then downloads every file
    concurrently. Items come back in input order.
    """

    async def handle(
        self, cmd: BatchImportStorageFiles
    ) -> Result[list[BatchImportItem], DomainError]:
        """Import several files.

        Returns:
            Success(list[BatchImportItem]): One item per requested file.
            Failure(IntegrationNotFoundError | ReauthRequiredError |
                ProviderError): The integration itself is unusable.
        """
        opened = await self._open(cmd.credential_id, cmd.owner_user_id)
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value

        results = await asyncio.gather(
            *(self._import(adapter, access_token, file_id) for file_id in cmd.file_ids)
        )

        items: list[BatchImportItem] = []
        for file_id, result in zip(cmd.file_ids, results, strict=True):
            match result:
                case Success(value=imported):
                    items.append(BatchImportItem(file_id=file_id, imported=imported))
                case Failure(error=error):
                    items.append(BatchImportItem(file_id=file_id, error=error))

        self._logger.info(
            "storage_batch_import_completed",
            provider=adapter.slug,
            credential_id=str(cmd.credential_id),
            requested=len(items),
            imported=sum(1 for item in items if item.success),
        )
        return Success(value=items)
