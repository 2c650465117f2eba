"""Google Drive adapter implementing StorageProviderProtocol.

Handles OAuth token exchange/refresh and Drive API v3 calls for listing,
metadata, downloads, search, thumbnails, shared drives and Workspace export.

Configuration loaded from settings (storagebridge/core/config.py):
    - google_drive_client_id: OAuth client ID
    - google_drive_client_secret: OAuth client secret
    - google_drive_redirect_uri: OAuth callback URL

Google API Documentation:
    - OAuth: https://developers.google.com/identity/protocols/oauth2/web-server
    - Drive API: https://developers.google.com/drive/api/reference/rest/v3
"""

import secrets
from typing import Any
from urllib.parse import urlencode

import structlog

from storagebridge.core.config import Settings
from storagebridge.core.constants import (
    BEARER_PREFIX,
    PROVIDER_TIMEOUT_DEFAULT,
    THUMBNAIL_SIZE_DEFAULT,
    TOKEN_BYTES,
)
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.enums import StorageCapability
from storagebridge.domain.errors import ProviderError, ProviderInvalidResponseError
from storagebridge.domain.protocols.storage_provider_protocol import (
    AuthorizationRequest,
    DownloadedFile,
    FileListing,
    SearchOptions,
    SharedDrive,
    StorageAuthResult,
    StorageFile,
    StorageQuota,
)
from storagebridge.domain.providers.registry import get_provider_metadata
from storagebridge.infrastructure.providers.base_api_client import (
    BaseStorageAPIClient,
)
from storagebridge.infrastructure.providers.google_drive.drive_utils import (
    build_search_query,
    export_filename,
    folder_query,
    is_workspace_file,
    resize_thumbnail,
    select_export_format,
)
from storagebridge.infrastructure.providers.google_drive.mappers import (
    GoogleDriveFileMapper,
)

logger = structlog.get_logger(__name__)

AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"

FILE_FIELDS = "id, name, mimeType, size, modifiedTime, thumbnailLink, webContentLink"
LIST_FIELDS = f"nextPageToken, files({FILE_FIELDS})"

DEFAULT_EXPIRES_IN = 3600
LIST_PAGE_SIZE = 100
SEARCH_PAGE_SIZE = 50


class GoogleDriveProvider(BaseStorageAPIClient):
    """Google Drive adapter.

    Example:
        >>> provider = GoogleDriveProvider(settings=get_settings())
        >>> match await provider.list_files(access_token):
        ...     case Success(value=listing):
        ...         print([f.name for f in listing.files])
        ...     case Failure(error=error):
        ...         print(error.message)
    """

    CAPABILITIES = frozenset(
        {
            StorageCapability.SEARCH,
            StorageCapability.THUMBNAIL,
            StorageCapability.BATCH_METADATA,
            StorageCapability.SHARED_DRIVES,
            StorageCapability.EXPORT,
        }
    )

    def __init__(
        self,
        *,
        settings: Settings,
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        super().__init__(
            provider_name="google-drive",
            display_name="Google Drive",
            client_id=settings.google_drive_client_id,
            client_secret=settings.google_drive_client_secret,
            redirect_uri=settings.google_drive_redirect_uri,
            timeout=timeout,
        )
        self._mapper = GoogleDriveFileMapper()
        metadata = get_provider_metadata(self.slug)
        self._scopes = metadata.scopes if metadata else ()

    @staticmethod
    def _auth_headers(access_token: str) -> dict[str, str]:
        return {"Authorization": f"{BEARER_PREFIX}{access_token}"}

    # =========================================================================
    # OAuth
    # =========================================================================

    def begin_auth(self) -> Result[AuthorizationRequest, ProviderError]:
        if not self.is_configured:
            return self._not_configured("begin_auth")

        state = secrets.token_urlsafe(TOKEN_BYTES)
        query = urlencode(
            {
                "client_id": self._client_id,
                "redirect_uri": self._redirect_uri,
                "response_type": "code",
                "scope": " ".join(self._scopes),
                "access_type": "offline",
                "prompt": "consent",
                "state": state,
            }
        )
        return Success(
            value=AuthorizationRequest(
                authorization_url=f"{AUTHORIZATION_URL}?{query}",
                state=state,
            )
        )

    async def exchange_code(self, code: str) -> Result[StorageAuthResult, ProviderError]:
        """Exchange an authorization code for tokens plus profile and quota.

        Returns:
            Success(StorageAuthResult): Tokens (refresh token may be "").
            Failure(ProviderAuthenticationError): Code rejected.
            Failure(ProviderUnavailableError): Google unreachable.
        """
        if not self.is_configured:
            return self._not_configured("exchange")

        token_result = await self._request_token(
            url=TOKEN_URL,
            form_data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self._redirect_uri,
            },
            operation="exchange",
        )
        if isinstance(token_result, Failure):
            return token_result

        data = token_result.value
        return await self._build_auth_result(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or "",
            expires_in=self._expires_in(data),
        )

    async def refresh(
        self, refresh_token: str
    ) -> Result[StorageAuthResult, ProviderError]:
        """Refresh the access token.

        Google usually omits ``refresh_token`` on refresh; the supplied
        token is kept in that case.
        """
        if not self.is_configured:
            return self._not_configured("refresh")
        if not refresh_token:
            return self._missing_refresh_token()

        token_result = await self._request_token(
            url=TOKEN_URL,
            form_data={
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
            operation="refresh",
        )
        if isinstance(token_result, Failure):
            return token_result

        data = token_result.value
        return await self._build_auth_result(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or refresh_token,
            expires_in=self._expires_in(data),
        )

    @staticmethod
    def _expires_in(data: dict[str, Any]) -> int:
        try:
            return int(data.get("expires_in") or DEFAULT_EXPIRES_IN)
        except (TypeError, ValueError):
            return DEFAULT_EXPIRES_IN

    async def _build_auth_result(
        self,
        *,
        access_token: str,
        refresh_token: str,
        expires_in: int,
    ) -> Result[StorageAuthResult, ProviderError]:
        headers = self._auth_headers(access_token)

        userinfo_result = await self._execute_and_parse_object(
            method="GET",
            url=USERINFO_URL,
            headers=headers,
            operation="get_userinfo",
        )
        if isinstance(userinfo_result, Failure):
            return userinfo_result

        about_result = await self._execute_and_parse_object(
            method="GET",
            url=f"{DRIVE_API_BASE}/about",
            headers=headers,
            params={"fields": "user,storageQuota"},
            operation="get_about",
        )
        if isinstance(about_result, Failure):
            return about_result

        userinfo = userinfo_result.value
        return Success(
            value=StorageAuthResult(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=expires_in,
                external_account_id=str(userinfo.get("id") or ""),
                email=userinfo.get("email") or "",
                display_name=userinfo.get("name") or "",
                picture_url=userinfo.get("picture") or None,
                quota=self._parse_quota(about_result.value.get("storageQuota")),
            )
        )

    @staticmethod
    def _parse_quota(data: Any) -> StorageQuota | None:
        if not isinstance(data, dict):
            return None
        try:
            return StorageQuota(
                used_bytes=int(data.get("usage") or 0),
                total_bytes=int(data.get("limit") or 0),
            )
        except (TypeError, ValueError):
            return None

    # =========================================================================
    # Files
    # =========================================================================

    async def list_files(
        self,
        access_token: str,
        folder_id: str | None = None,
        page_token: str | None = None,
    ) -> Result[FileListing, ProviderError]:
        if not self.is_configured:
            return self._not_configured("list_files")

        params: dict[str, Any] = {
            "q": folder_query(folder_id),
            "fields": LIST_FIELDS,
            "pageSize": LIST_PAGE_SIZE,
            "orderBy": "folder,name,modifiedTime desc",
        }
        if page_token:
            params["pageToken"] = page_token

        return await self._fetch_listing(
            access_token, params, operation="list_files", file_id=folder_id
        )

    async def _fetch_listing(
        self,
        access_token: str,
        params: dict[str, Any],
        *,
        operation: str,
        file_id: str | None = None,
    ) -> Result[FileListing, ProviderError]:
        result = await self._execute_and_parse_object(
            method="GET",
            url=f"{DRIVE_API_BASE}/files",
            headers=self._auth_headers(access_token),
            params=params,
            operation=operation,
            file_id=file_id,
        )
        if isinstance(result, Failure):
            return result

        data = result.value
        return Success(
            value=FileListing(
                files=self._mapper.map_files(data.get("files") or []),
                next_page_token=data.get("nextPageToken") or None,
            )
        )

    async def get_file(
        self, access_token: str, file_id: str
    ) -> Result[StorageFile, ProviderError]:
        if not self.is_configured:
            return self._not_configured("get_file")

        result = await self._execute_and_parse_object(
            method="GET",
            url=f"{DRIVE_API_BASE}/files/{file_id}",
            headers=self._auth_headers(access_token),
            params={"fields": FILE_FIELDS},
            operation="get_file",
            file_id=file_id,
        )
        if isinstance(result, Failure):
            return result

        storage_file = self._mapper.map_file(result.value)
        if storage_file is None:
            return self._invalid_response("get_file", "File resource has no id")
        return Success(value=storage_file)

    async def download(
        self, access_token: str, file_id: str
    ) -> Result[DownloadedFile, ProviderError]:
        """Stream the raw file contents (``alt=media``).

        Metadata is fetched first for the filename and MIME type.
        """
        metadata = await self.get_file(access_token, file_id)
        if isinstance(metadata, Failure):
            return metadata

        storage_file = metadata.value
        return await self._open_download(
            url=f"{DRIVE_API_BASE}/files/{file_id}",
            headers=self._auth_headers(access_token),
            params={"alt": "media"},
            operation="download",
            file_id=file_id,
            filename=storage_file.name or file_id,
            mime_type=storage_file.mime_type or "application/octet-stream",
        )

    async def get_download_url(
        self,
        access_token: str,
        file_id: str,
        expires_in: int | None = None,
    ) -> Result[str, ProviderError]:
        """Return the file's ``webContentLink`` (``expires_in`` is ignored)."""
        if not self.is_configured:
            return self._not_configured("get_download_url")

        result = await self._execute_and_parse_object(
            method="GET",
            url=f"{DRIVE_API_BASE}/files/{file_id}",
            headers=self._auth_headers(access_token),
            params={"fields": "webContentLink"},
            operation="get_download_url",
            file_id=file_id,
        )
        if isinstance(result, Failure):
            return result

        link = result.value.get("webContentLink")
        if not link:
            return self._invalid_response(
                "get_download_url", "No download URL available for this file"
            )
        return Success(value=link)

    # =========================================================================
    # Optional capabilities
    # =========================================================================

    async def search_files(
        self, access_token: str, options: SearchOptions
    ) -> Result[FileListing, ProviderError]:
        if not self.is_configured:
            return self._not_configured("search_files")

        params: dict[str, Any] = {
            "q": build_search_query(options),
            "fields": LIST_FIELDS,
            "pageSize": options.page_size or SEARCH_PAGE_SIZE,
            "orderBy": "modifiedTime desc",
        }
        if options.page_token:
            params["pageToken"] = options.page_token

        return await self._fetch_listing(access_token, params, operation="search_files")

    async def get_thumbnail(
        self,
        access_token: str,
        file_id: str,
        size: int = THUMBNAIL_SIZE_DEFAULT,
    ) -> Result[str | None, ProviderError]:
        if not self.is_configured:
            return self._not_configured("get_thumbnail")

        result = await self._execute_and_parse_object(
            method="GET",
            url=f"{DRIVE_API_BASE}/files/{file_id}",
            headers=self._auth_headers(access_token),
            params={"fields": "thumbnailLink"},
            operation="get_thumbnail",
            file_id=file_id,
        )
        if isinstance(result, Failure):
            return result

        link = result.value.get("thumbnailLink")
        return Success(value=resize_thumbnail(link, size) if link else None)

    async def list_shared_drives(
        self, access_token: str
    ) -> Result[list[SharedDrive], ProviderError]:
        if not self.is_configured:
            return self._not_configured("list_shared_drives")

        result = await self._execute_and_parse_object(
            method="GET",
            url=f"{DRIVE_API_BASE}/drives",
            headers=self._auth_headers(access_token),
            params={"pageSize": LIST_PAGE_SIZE},
            operation="list_shared_drives",
        )
        if isinstance(result, Failure):
            return result

        drives = [
            SharedDrive(id=item["id"], name=item["name"])
            for item in result.value.get("drives") or []
            if item.get("id") and item.get("name")
        ]
        return Success(value=drives)

    async def export_file(
        self,
        access_token: str,
        file_id: str,
        export_format: str | None = None,
    ) -> Result[DownloadedFile, ProviderError]:
        """Export a Workspace document and stream the converted bytes.

        Args:
            export_format: Extension or MIME type; None picks the default
                (first listed) format for the document type.
        """
        metadata = await self.get_file(access_token, file_id)
        if isinstance(metadata, Failure):
            return metadata

        storage_file = metadata.value
        if not is_workspace_file(storage_file.mime_type):
            return self._export_not_supported(
                file_id, "File is not a Google Workspace document"
            )

        selected = select_export_format(storage_file.mime_type, export_format)
        if selected is None:
            return self._export_not_supported(
                file_id,
                f"Export format {export_format or 'default'} is not available "
                f"for {storage_file.mime_type}",
            )

        logger.info(
            "google_drive_export_started",
            file_id=file_id,
            export_mime_type=selected.mime_type,
        )
        return await self._open_download(
            url=f"{DRIVE_API_BASE}/files/{file_id}/export",
            headers=self._auth_headers(access_token),
            params={"mimeType": selected.mime_type},
            operation="export_file",
            file_id=file_id,
            filename=export_filename(storage_file.name, selected),
            mime_type=selected.mime_type,
        )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def _invalid_response(self, operation: str, message: str) -> Failure[ProviderError]:
        return Failure(
            error=ProviderInvalidResponseError(
                code=ErrorCode.PROVIDER_CREDENTIAL_INVALID,
                message=message,
                provider_name=self.slug,
                operation=operation,
            )
        )

    def _export_not_supported(self, file_id: str, message: str) -> Failure[ProviderError]:
        return Failure(
            error=ProviderError(
                code=ErrorCode.STORAGE_EXPORT_NOT_SUPPORTED,
                message=message,
                provider_name=self.slug,
                operation="export_file",
                details={"file_id": file_id},
            )
        )
