"""StorageProviderProtocol for cloud drive adapters.

Port (interface) for hexagonal architecture. Infrastructure implements this
protocol once per backing service (Google Drive, Dropbox).

Required operations: identity (begin_auth, exchange_code, refresh), listing,
metadata, download and download-url. Optional operations are declared via
the ``capabilities`` property; an adapter that lacks a capability still
exposes the method but returns CapabilityNotSupportedError, so callers
branch on ``capabilities`` instead of probing for attributes.

All methods return Result types following the railway-oriented pattern.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from storagebridge.domain.enums import StorageCapability

if TYPE_CHECKING:
    from storagebridge.core.errors import DomainError
    from storagebridge.core.result import Result
    from storagebridge.domain.errors import ProviderError, ProviderNotFoundError


# =============================================================================
# Provider Data Types (normalized across providers)
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class AuthorizationRequest:
    """Consent URL plus the anti-forgery state it embeds.

    Attributes:
        authorization_url: URL the user is redirected to.
        state: Random opaque token echoed back on the callback.
    """

    authorization_url: str
    state: str


@dataclass(frozen=True, kw_only=True)
class StorageQuota:
    """Account storage usage in bytes."""

    used_bytes: int
    total_bytes: int


@dataclass(frozen=True, kw_only=True)
class StorageAuthResult:
    """Tokens and account identity returned by exchange/refresh.

    Attributes:
        access_token: Bearer token for API calls.
        refresh_token: Refresh token; empty string when the provider sent none.
        expires_in: Seconds until access_token expires (None = unknown).
        external_account_id: Provider-side account identifier.
        email: Account email address.
        display_name: Account display name.
        picture_url: Avatar URL, if the provider exposes one.
        quota: Storage usage, if the provider reported it.
    """

    access_token: str
    refresh_token: str
    expires_in: int | None
    external_account_id: str
    email: str = ""
    display_name: str = ""
    picture_url: str | None = None
    quota: StorageQuota | None = None


@dataclass(frozen=True, kw_only=True)
class StorageFile:
    """File metadata normalized across providers.

    Unknown values default to empty string / zero, never None, except for
    the explicitly optional link fields.

    Attributes:
        id: Provider file identifier.
        name: File name.
        mime_type: MIME type ("" when unknown).
        size_bytes: Size in bytes (0 for folders or when unknown).
        modified_time: RFC 3339 timestamp ("" when unknown).
        is_folder: Whether the entry is a folder.
        path: Display path, if the provider has one.
        thumbnail_url: Provider thumbnail link, if any.
        web_content_link: Provider download link, if any.
    """

    id: str
    name: str
    mime_type: str = ""
    size_bytes: int = 0
    modified_time: str = ""
    is_folder: bool = False
    path: str | None = None
    thumbnail_url: str | None = None
    web_content_link: str | None = None


@dataclass(frozen=True, kw_only=True)
class FileListing:
    """One page of files.

    Attributes:
        files: Files on this page.
        next_page_token: Opaque provider token for the next page; pass it
            back unmodified.
    """

    files: list[StorageFile] = field(default_factory=list)
    next_page_token: str | None = None


@dataclass(frozen=True, kw_only=True)
class SearchOptions:
    """Search parameters for SEARCH-capable adapters."""

    query: str
    mime_type: str | None = None
    folder_id: str | None = None
    page_token: str | None = None
    page_size: int | None = None


@dataclass(frozen=True, kw_only=True)
class SharedDrive:
    """Shared (team) drive visible to the account."""

    id: str
    name: str


class DownloadedFile(Protocol):
    """Open byte stream for a provider download or export.

    The stream holds an HTTP connection; consume it with ``iter_bytes`` or
    ``save_to`` and release it with ``aclose``.
    """

    @property
    def filename(self) -> str: ...

    @property
    def mime_type(self) -> str: ...

    def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield the body in chunks, closing the stream when exhausted."""
        ...

    async def save_to(self, destination: Path) -> "Result[int, DomainError]":
        """Write the whole body to ``destination``.

        Returns:
            Success(int): Bytes written.
            Failure(ProviderUnavailableError): Stream interrupted.
            Failure(MediaResolutionError): Local write failed.
        """
        ...

    async def aclose(self) -> None:
        """Release the underlying connection (idempotent)."""
        ...


# =============================================================================
# Protocol Definition
# =============================================================================


class StorageProviderProtocol(Protocol):
    """Uniform contract over one remote drive API.

    Adapters must be constructible without configuration; unconfigured
    adapters report ``is_configured == False`` and fail each call with
    ProviderNotConfiguredError instead of crashing the process.
    """

    @property
    def slug(self) -> str:
        """Provider identifier (registry key), e.g. "google-drive"."""
        ...

    @property
    def display_name(self) -> str:
        """Human-readable provider name."""
        ...

    @property
    def is_configured(self) -> bool:
        """Whether client id, secret and redirect URI are all present."""
        ...

    @property
    def capabilities(self) -> frozenset[StorageCapability]:
        """Optional operations this adapter implements."""
        ...

    def begin_auth(self) -> "Result[AuthorizationRequest, ProviderError]":
        """Build the consent URL with a fresh anti-forgery state."""
        ...

    async def exchange_code(
        self, code: str
    ) -> "Result[StorageAuthResult, ProviderError]":
        """Exchange an authorization code for tokens and account identity."""
        ...

    async def refresh(
        self, refresh_token: str
    ) -> "Result[StorageAuthResult, ProviderError]":
        """Obtain a new access token; keeps the old refresh token if none is returned."""
        ...

    async def list_files(
        self,
        access_token: str,
        folder_id: str | None = None,
        page_token: str | None = None,
    ) -> "Result[FileListing, ProviderError]":
        """List one page of a folder (provider root when folder_id is None)."""
        ...

    async def get_file(
        self, access_token: str, file_id: str
    ) -> "Result[StorageFile, ProviderError]":
        """Get file metadata; StorageFileNotFoundError when missing."""
        ...

    async def download(
        self, access_token: str, file_id: str
    ) -> "Result[DownloadedFile, ProviderError]":
        """Open a streaming download of the file contents."""
        ...

    async def get_download_url(
        self,
        access_token: str,
        file_id: str,
        expires_in: int | None = None,
    ) -> "Result[str, ProviderError]":
        """Get a URL the file can be fetched from."""
        ...

    # Optional operations -------------------------------------------------

    async def search_files(
        self, access_token: str, options: SearchOptions
    ) -> "Result[FileListing, ProviderError]":
        """SEARCH: find files by name/type."""
        ...

    async def get_thumbnail(
        self, access_token: str, file_id: str, size: int = 256
    ) -> "Result[str | None, ProviderError]":
        """THUMBNAIL: thumbnail URL (or data URL), None if unavailable."""
        ...

    async def batch_get_files(
        self, access_token: str, file_ids: list[str]
    ) -> "Result[list[StorageFile], ProviderError]":
        """BATCH_METADATA: metadata for many files, skipping failures."""
        ...

    async def list_shared_drives(
        self, access_token: str
    ) -> "Result[list[SharedDrive], ProviderError]":
        """SHARED_DRIVES: shared drives visible to the account."""
        ...

    async def export_file(
        self, access_token: str, file_id: str, export_format: str | None = None
    ) -> "Result[DownloadedFile, ProviderError]":
        """EXPORT: convert a provider-native document and stream it."""
        ...

    async def create_public_link(
        self, access_token: str, file_id: str
    ) -> "Result[str, ProviderError]":
        """PUBLIC_LINK: permanent direct-download URL for the file."""
        ...


class StorageProviderLookup(Protocol):
    """Resolves a provider slug to its adapter (the provider registry)."""

    def get(
        self, slug: str
    ) -> "Result[StorageProviderProtocol, ProviderNotFoundError]": ...
