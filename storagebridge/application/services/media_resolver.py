"""Media resolution pipeline.

Turns post media references into something a publishing adapter can use:
an external URL, a provider public link, or the absolute path of a local
copy under the public media directory.

Batch semantics:
    - References are resolved in input order.
    - Local copies created by a batch are tracked as temp artifacts.
    - If any reference fails, or the call is cancelled, every artifact the
      batch created is deleted before the error is returned (or the
      cancellation propagates).
    - On success the caller owns the artifacts and releases them with
      ``ResolvedMedia.cleanup()`` after publishing.
"""

import re
from dataclasses import replace
from pathlib import Path, PurePosixPath
from uuid import UUID, uuid4

from storagebridge.application.services.token_lifecycle import TokenLifecycleManager
from storagebridge.core.enums import ErrorCode
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.enums import MediaType, StorageCapability
from storagebridge.domain.errors import IntegrationNotFoundError, MediaResolutionError
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
from storagebridge.domain.value_objects import (
    ExternalMedia,
    MediaReference,
    StorageBackedMedia,
    parse_media_reference,
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str, fallback: str) -> str:
    """Reduce a provider filename to a safe basename.

    Directory components are dropped and anything outside ``[A-Za-z0-9._-]``
    becomes ``_``. Names that end up empty or dot-only use ``fallback``.
    """
    base = PurePosixPath(filename.replace("\\", "/")).name
    safe = _UNSAFE_FILENAME_CHARS.sub("_", base)
    if not safe.strip("."):
        safe = _UNSAFE_FILENAME_CHARS.sub("_", fallback) or "file"
    return safe


class TempArtifacts:
    """Files created by one resolution batch."""

    def __init__(
        self, filesystem: MediaFilesystemProtocol, logger: LoggerProtocol
    ) -> None:
        self._filesystem = filesystem
        self._logger = logger
        self._paths: list[Path] = []

    def add(self, path: Path) -> None:
        self._paths.append(path)

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def delete_all(self) -> None:
        """Delete every tracked file; errors are logged, never raised."""
        paths, self._paths = self._paths, []
        for path in paths:
            try:
                self._filesystem.delete(path)
            except OSError as e:
                self._logger.warning(
                    "media_artifact_delete_failed",
                    path=str(path),
                    error=str(e),
                )

    def __len__(self) -> int:
        return len(self._paths)


class ResolvedMedia:
    """Resolved references plus the cleanup action for their artifacts."""

    def __init__(
        self, references: list[MediaReference], artifacts: TempArtifacts
    ) -> None:
        self.references = references
        self._artifacts = artifacts

    @property
    def artifact_paths(self) -> list[Path]:
        return self._artifacts.paths

    def cleanup(self) -> None:
        """Delete the local copies this batch created. Safe to call twice."""
        self._artifacts.delete_all()


class MediaResolver:
    """Resolves MediaReference batches for one publishing attempt.

    Dependencies (injected via constructor):
        - StorageCredentialRepository: Owner-scoped credential lookup
        - TokenLifecycleManager: Valid access tokens (refreshes when needed)
        - StorageProviderLookup: Adapter per provider slug
        - MediaFilesystemProtocol: Temp files and public copies
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        credential_repo: StorageCredentialRepository,
        token_manager: TokenLifecycleManager,
        providers: StorageProviderLookup,
        filesystem: MediaFilesystemProtocol,
        public_dir: Path,
        logger: LoggerProtocol,
    ) -> None:
        self._credential_repo = credential_repo
        self._token_manager = token_manager
        self._providers = providers
        self._filesystem = filesystem
        self._public_dir = public_dir.resolve()
        self._logger = logger

    async def resolve(
        self, references: list[MediaReference], owner_user_id: UUID
    ) -> Result[ResolvedMedia, DomainError]:
        """Resolve a batch of media references for ``owner_user_id``.

        Returns:
            Success(ResolvedMedia): References in input order; call
                ``cleanup()`` once publishing is done.
            Failure(IntegrationNotFoundError): Credential absent, malformed,
                disabled, deleted or owned by another user.
            Failure(ReauthRequiredError | ProviderError): Token or download
                failure from the provider.
            Failure(MediaResolutionError): Local filesystem failure.
        """
        artifacts = TempArtifacts(self._filesystem, self._logger)
        resolved: list[MediaReference] = []
        completed = False
        try:
            for reference in references:
                result = await self._resolve_one(reference, owner_user_id, artifacts)
                if isinstance(result, Failure):
                    return result
                resolved.append(result.value)
            completed = True
        finally:
            if not completed:
                self._logger.info(
                    "media_resolution_rollback",
                    owner_user_id=str(owner_user_id),
                    artifacts=len(artifacts),
                    resolved=len(resolved),
                )
                artifacts.delete_all()

        self._logger.info(
            "media_resolution_completed",
            owner_user_id=str(owner_user_id),
            references=len(resolved),
            artifacts=len(artifacts),
        )
        return Success(value=ResolvedMedia(resolved, artifacts))

    async def _resolve_one(
        self,
        reference: MediaReference,
        owner_user_id: UUID,
        artifacts: TempArtifacts,
    ) -> Result[MediaReference, DomainError]:
        target = parse_media_reference(reference.path)
        if isinstance(target, ExternalMedia):
            return Success(value=reference)

        credential_id = target.credential_uuid()
        credential = (
            await self._credential_repo.find_for_owner(credential_id, owner_user_id)
            if credential_id is not None
            else None
        )
        if credential is None or not credential.is_usable():
            return Failure(
                error=IntegrationNotFoundError(
                    code=ErrorCode.INTEGRATION_NOT_FOUND,
                    message="Storage integration not found",
                    resource_id=target.credential_id,
                )
            )

        adapter_result = self._providers.get(credential.provider_slug)
        if isinstance(adapter_result, Failure):
            return adapter_result
        adapter = adapter_result.value

        token_result = await self._token_manager.ensure_access_token(credential)
        if isinstance(token_result, Failure):
            return token_result
        access_token = token_result.value

        if StorageCapability.PUBLIC_LINK in adapter.capabilities:
            link_result = await adapter.create_public_link(access_token, target.file_id)
            match link_result:
                case Success(value=url):
                    self._logger.debug(
                        "media_resolved_as_public_link",
                        provider=adapter.slug,
                        file_id=target.file_id,
                    )
                    return Success(
                        value=replace(reference, path=url, resolved_as_public_url=True)
                    )
                case Failure(error=error):
                    self._logger.warning(
                        "media_public_link_fallback",
                        provider=adapter.slug,
                        file_id=target.file_id,
                        error_code=error.code.value,
                    )

        return await self._copy_to_public_dir(
            adapter, access_token, reference, target, artifacts
        )

    async def _copy_to_public_dir(
        self,
        adapter: StorageProviderProtocol,
        access_token: str,
        reference: MediaReference,
        target: StorageBackedMedia,
        artifacts: TempArtifacts,
    ) -> Result[MediaReference, DomainError]:
        download_result = await adapter.download(access_token, target.file_id)
        if isinstance(download_result, Failure):
            return download_result
        download = download_result.value

        safe_name = sanitize_filename(download.filename, target.file_id)
        temp_path = self._filesystem.temp_path(safe_name)
        destination = self._public_dir / f"{uuid4()}-{safe_name}"
        try:
            saved = await download.save_to(temp_path)
            if isinstance(saved, Failure):
                return saved

            self._filesystem.mkdir_all(self._public_dir)
            artifacts.add(destination)
            self._filesystem.copy(temp_path, destination)
        except OSError as e:
            self._logger.error(
                "media_copy_failed",
                provider=adapter.slug,
                file_id=target.file_id,
                error=str(e),
            )
            return Failure(
                error=MediaResolutionError(
                    code=ErrorCode.MEDIA_RESOLUTION_FAILED,
                    message=f"Failed to stage media file: {e}",
                    path=str(destination),
                )
            )
        finally:
            await download.aclose()
            try:
                self._filesystem.delete(temp_path)
            except OSError as e:
                self._logger.warning(
                    "media_temp_delete_failed",
                    path=str(temp_path),
                    error=str(e),
                )

        self._logger.debug(
            "media_resolved_as_local_copy",
            provider=adapter.slug,
            file_id=target.file_id,
            bytes=saved.value,
        )
        return Success(
            value=replace(
                reference,
                path=str(destination),
                resolved_as_public_url=False,
                type=reference.type or MediaType.from_mime_type(download.mime_type),
            )
        )
