"""Dropbox adapter implementing StorageProviderProtocol.

Handles OAuth token exchange/refresh and Dropbox API v2 calls for listing,
metadata, downloads, temporary and shared links, search and thumbnails.

Configuration loaded from settings (storagebridge/core/config.py):
    - dropbox_client_id: App key
    - dropbox_client_secret: App secret
    - dropbox_redirect_uri: OAuth callback URL

Dropbox API Documentation:
    - OAuth: https://developers.dropbox.com/oauth-guide
    - HTTP API: https://www.dropbox.com/developers/documentation/http/documentation

Notes:
    - Every RPC endpoint is a POST with a JSON body.
    - Path/lookup failures come back as 409 with an ``error_summary``.
    - Content endpoints take their arguments in the Dropbox-API-Arg header.
"""

import base64
import json
import secrets
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from storagebridge.core.config import Settings
from storagebridge.core.constants import (
    BEARER_PREFIX,
    PROVIDER_TIMEOUT_DEFAULT,
    RESPONSE_BODY_MAX_LENGTH,
    THUMBNAIL_SIZE_DEFAULT,
    TOKEN_BYTES,
)
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.enums import StorageCapability
from storagebridge.domain.errors import (
    ProviderError,
    ProviderInvalidResponseError,
    StorageFileNotFoundError,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    AuthorizationRequest,
    DownloadedFile,
    FileListing,
    SearchOptions,
    StorageAuthResult,
    StorageFile,
    StorageQuota,
)
from storagebridge.domain.providers.registry import get_provider_metadata
from storagebridge.infrastructure.providers.base_api_client import (
    BaseStorageAPIClient,
)
from storagebridge.infrastructure.providers.dropbox.dropbox_utils import (
    is_supported_media_file,
    thumbnail_size_tag,
    to_direct_link,
)
from storagebridge.infrastructure.providers.dropbox.mappers import DropboxFileMapper

logger = structlog.get_logger(__name__)

AUTHORIZATION_URL = "https://www.dropbox.com/oauth2/authorize"
TOKEN_URL = "https://api.dropboxapi.com/oauth2/token"
API_BASE = "https://api.dropboxapi.com/2"
CONTENT_BASE = "https://content.dropboxapi.com/2"

DEFAULT_EXPIRES_IN = 14400
LIST_PAGE_SIZE = 50
SEARCH_PAGE_SIZE = 50


class DropboxProvider(BaseStorageAPIClient):
    """Dropbox adapter.

    File identifiers are Dropbox ids (``id:...``) or paths; both are
    accepted wherever the API takes a ``path`` argument.
    """

    CAPABILITIES = frozenset(
        {
            StorageCapability.SEARCH,
            StorageCapability.THUMBNAIL,
            StorageCapability.BATCH_METADATA,
            StorageCapability.PUBLIC_LINK,
        }
    )

    def __init__(
        self,
        *,
        settings: Settings,
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        super().__init__(
            provider_name="dropbox",
            display_name="Dropbox",
            client_id=settings.dropbox_client_id,
            client_secret=settings.dropbox_client_secret,
            redirect_uri=settings.dropbox_redirect_uri,
            timeout=timeout,
        )
        self._mapper = DropboxFileMapper()
        metadata = get_provider_metadata(self.slug)
        self._scopes = metadata.scopes if metadata else ()

    @staticmethod
    def _auth_headers(access_token: str) -> dict[str, str]:
        return {"Authorization": f"{BEARER_PREFIX}{access_token}"}

    def _basic_auth_header(self) -> str:
        credentials = f"{self._client_id}:{self._client_secret}"
        return f"Basic {base64.b64encode(credentials.encode()).decode()}"

    def _check_error_response(
        self,
        response: httpx.Response,
        operation: str,
        file_id: str | None = None,
    ) -> Failure[ProviderError] | None:
        """Map Dropbox 409 endpoint errors, then defer to the base mapping."""
        if response.status_code == 409:
            if "not_found" in response.text:
                return self._file_not_found(operation, file_id)
            self._logger.warning(
                "dropbox_api_endpoint_error",
                operation=operation,
                error_summary=response.text[:RESPONSE_BODY_MAX_LENGTH],
            )
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.PROVIDER_CREDENTIAL_INVALID,
                    message="Dropbox rejected the request",
                    provider_name=self.slug,
                    operation=operation,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )
        return super()._check_error_response(response, operation, file_id)

    async def _rpc(
        self,
        endpoint: str,
        access_token: str,
        body: dict[str, Any] | None = None,
        *,
        operation: str,
        file_id: str | None = None,
    ) -> Result[dict[str, Any], ProviderError]:
        return await self._execute_and_parse_object(
            method="POST",
            url=f"{API_BASE}/{endpoint}",
            headers=self._auth_headers(access_token),
            json_data=body,
            operation=operation,
            file_id=file_id,
        )

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
                "response_type": "code",
                "token_access_type": "offline",
                "redirect_uri": self._redirect_uri,
                "scope": " ".join(self._scopes),
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
        if not self.is_configured:
            return self._not_configured("exchange")

        token_result = await self._request_token(
            url=TOKEN_URL,
            headers={"Authorization": self._basic_auth_header()},
            form_data={
                "grant_type": "authorization_code",
                "code": code,
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
        if not self.is_configured:
            return self._not_configured("refresh")
        if not refresh_token:
            return self._missing_refresh_token()

        token_result = await self._request_token(
            url=TOKEN_URL,
            headers={"Authorization": self._basic_auth_header()},
            form_data={
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
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
        account_result = await self._rpc(
            "users/get_current_account", access_token, operation="get_account"
        )
        if isinstance(account_result, Failure):
            return account_result

        usage_result = await self._rpc(
            "users/get_space_usage", access_token, operation="get_space_usage"
        )
        if isinstance(usage_result, Failure):
            return usage_result

        account = account_result.value
        name = account.get("name") or {}
        display_name = " ".join(
            part for part in (name.get("given_name"), name.get("surname")) if part
        )

        return Success(
            value=StorageAuthResult(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=expires_in,
                external_account_id=account.get("account_id") or "",
                email=account.get("email") or "",
                display_name=display_name or name.get("display_name") or "",
                picture_url=account.get("profile_photo_url") or None,
                quota=self._parse_quota(usage_result.value),
            )
        )

    @staticmethod
    def _parse_quota(usage: dict[str, Any]) -> StorageQuota | None:
        allocation = usage.get("allocation") or {}
        if "allocated" not in allocation:
            return None
        return StorageQuota(
            used_bytes=int(usage.get("used") or 0),
            total_bytes=int(allocation.get("allocated") or 0),
        )

    # =========================================================================
    # Files
    # =========================================================================

    async def list_files(
        self,
        access_token: str,
        folder_id: str | None = None,
        page_token: str | None = None,
    ) -> Result[FileListing, ProviderError]:
        """List one page of a folder, keeping folders and media files only.

        ``page_token`` is the Dropbox cursor from the previous page.
        """
        if not self.is_configured:
            return self._not_configured("list_files")

        if page_token:
            result = await self._rpc(
                "files/list_folder/continue",
                access_token,
                {"cursor": page_token},
                operation="list_files",
            )
        else:
            result = await self._rpc(
                "files/list_folder",
                access_token,
                {
                    "path": folder_id or "",
                    "limit": LIST_PAGE_SIZE,
                    "include_media_info": True,
                },
                operation="list_files",
                file_id=folder_id,
            )
        if isinstance(result, Failure):
            return result

        data = result.value
        files = [
            f
            for f in (self._mapper.map_entry(e) for e in data.get("entries") or [])
            if f is not None and (f.is_folder or is_supported_media_file(f.name))
        ]
        return Success(
            value=FileListing(
                files=files,
                next_page_token=data.get("cursor") if data.get("has_more") else None,
            )
        )

    async def get_file(
        self, access_token: str, file_id: str
    ) -> Result[StorageFile, ProviderError]:
        if not self.is_configured:
            return self._not_configured("get_file")

        result = await self._rpc(
            "files/get_metadata",
            access_token,
            {"path": file_id},
            operation="get_file",
            file_id=file_id,
        )
        if isinstance(result, Failure):
            return result

        storage_file = self._mapper.map_entry(result.value)
        if storage_file is None:
            return self._file_not_found("get_file", file_id)
        return Success(value=storage_file)

    async def download(
        self, access_token: str, file_id: str
    ) -> Result[DownloadedFile, ProviderError]:
        metadata = await self.get_file(access_token, file_id)
        if isinstance(metadata, Failure):
            return metadata

        storage_file = metadata.value
        if storage_file.is_folder:
            return self._not_a_file("download", file_id)

        return await self._open_download(
            method="POST",
            url=f"{CONTENT_BASE}/files/download",
            headers={
                **self._auth_headers(access_token),
                "Dropbox-API-Arg": json.dumps({"path": file_id}),
            },
            operation="download",
            file_id=file_id,
            filename=storage_file.name or file_id,
            mime_type=storage_file.mime_type,
        )

    async def get_download_url(
        self,
        access_token: str,
        file_id: str,
        expires_in: int | None = None,
    ) -> Result[str, ProviderError]:
        """Temporary (4 hour) link; ``expires_in`` is fixed by Dropbox."""
        if not self.is_configured:
            return self._not_configured("get_download_url")

        result = await self._rpc(
            "files/get_temporary_link",
            access_token,
            {"path": file_id},
            operation="get_download_url",
            file_id=file_id,
        )
        if isinstance(result, Failure):
            return result

        link = result.value.get("link")
        if not link:
            return self._invalid_response("get_download_url", "Response has no link")
        return Success(value=link)

    # =========================================================================
    # Optional capabilities
    # =========================================================================

    async def create_public_link(
        self, access_token: str, file_id: str
    ) -> Result[str, ProviderError]:
        """Permanent direct-download URL, reusing an existing shared link."""
        if not self.is_configured:
            return self._not_configured("create_public_link")

        existing = await self._rpc(
            "sharing/list_shared_links",
            access_token,
            {"path": file_id, "direct_only": True},
            operation="create_public_link",
            file_id=file_id,
        )
        match existing:
            case Success(value=data) if data.get("links"):
                return Success(value=to_direct_link(data["links"][0]["url"]))
            case Failure(error=StorageFileNotFoundError() as error):
                return Failure(error=error)
            case Failure(error=error):
                logger.info(
                    "dropbox_list_shared_links_failed",
                    file_id=file_id,
                    error_code=error.code.value,
                )

        created = await self._rpc(
            "sharing/create_shared_link_with_settings",
            access_token,
            {"path": file_id},
            operation="create_public_link",
            file_id=file_id,
        )
        if isinstance(created, Failure):
            return created

        url = created.value.get("url")
        if not url:
            return self._invalid_response("create_public_link", "Response has no url")
        return Success(value=to_direct_link(url))

    async def search_files(
        self, access_token: str, options: SearchOptions
    ) -> Result[FileListing, ProviderError]:
        if not self.is_configured:
            return self._not_configured("search_files")

        if options.page_token:
            result = await self._rpc(
                "files/search/continue_v2",
                access_token,
                {"cursor": options.page_token},
                operation="search_files",
            )
        else:
            search_options: dict[str, Any] = {
                "max_results": options.page_size or SEARCH_PAGE_SIZE,
                "file_status": "active",
                "filename_only": False,
            }
            if options.folder_id:
                search_options["path"] = options.folder_id
            result = await self._rpc(
                "files/search_v2",
                access_token,
                {"query": options.query, "options": search_options},
                operation="search_files",
            )
        if isinstance(result, Failure):
            return result

        data = result.value
        files: list[StorageFile] = []
        for match_item in data.get("matches") or []:
            metadata = match_item.get("metadata") or {}
            if metadata.get(".tag") != "metadata":
                continue
            storage_file = self._mapper.map_entry(metadata.get("metadata") or {})
            if storage_file is None:
                continue
            if options.mime_type and not storage_file.mime_type.startswith(
                options.mime_type.rstrip("*")
            ):
                continue
            files.append(storage_file)

        return Success(
            value=FileListing(
                files=files,
                next_page_token=data.get("cursor") if data.get("has_more") else None,
            )
        )

    async def get_thumbnail(
        self,
        access_token: str,
        file_id: str,
        size: int = THUMBNAIL_SIZE_DEFAULT,
    ) -> Result[str | None, ProviderError]:
        """JPEG thumbnail as a ``data:image/jpeg;base64,`` URL."""
        metadata = await self.get_file(access_token, file_id)
        if isinstance(metadata, Failure):
            return metadata
        if metadata.value.is_folder:
            return Success(value=None)

        arg = {
            "resource": {".tag": "path", "path": metadata.value.path or file_id},
            "format": "jpeg",
            "size": thumbnail_size_tag(size),
        }
        result = await self._execute_request(
            method="POST",
            url=f"{CONTENT_BASE}/files/get_thumbnail_v2",
            headers={
                **self._auth_headers(access_token),
                "Dropbox-API-Arg": json.dumps(arg),
            },
            operation="get_thumbnail",
        )
        if isinstance(result, Failure):
            return result

        error_result = self._check_error_response(
            result.value, "get_thumbnail", file_id
        )
        if error_result is not None:
            return error_result

        encoded = base64.b64encode(result.value.content).decode("ascii")
        return Success(value=f"data:image/jpeg;base64,{encoded}")

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

    def _not_a_file(self, operation: str, file_id: str) -> Failure[ProviderError]:
        return Failure(
            error=ProviderInvalidResponseError(
                code=ErrorCode.PROVIDER_CREDENTIAL_INVALID,
                message="Path is a folder, not a file",
                provider_name=self.slug,
                operation=operation,
                details={"file_id": file_id},
            )
        )
