"""Base API client for storage provider HTTP communication.

This module provides a base class for storage adapters that handles:
- HTTP request execution with timeout/connection error handling
- Response status code interpretation
- JSON parsing with error handling
- Streaming downloads
- Configuration and capability gating
- Structured logging with provider context

Subclasses only need to:
1. Declare slug, display name and capabilities
2. Build provider-specific requests and map responses to StorageFile

Architecture:
    - Infrastructure layer (adapter for external APIs)
    - Uses httpx for async HTTP
    - Returns Result types (no exceptions for business errors)
"""

import asyncio
from typing import Any

import httpx
import structlog

from storagebridge.core.constants import (
    PROVIDER_TIMEOUT_DEFAULT,
    RESPONSE_BODY_MAX_LENGTH,
    THUMBNAIL_SIZE_DEFAULT,
)
from storagebridge.core.enums import ErrorCode
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.enums import StorageCapability
from storagebridge.domain.errors import (
    CapabilityNotSupportedError,
    MissingRefreshTokenError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderInvalidResponseError,
    ProviderNotConfiguredError,
    ProviderRateLimitError,
    ProviderTokenRefreshError,
    ProviderUnavailableError,
    StorageFileNotFoundError,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    DownloadedFile,
    FileListing,
    SearchOptions,
    SharedDrive,
    StorageFile,
)
from storagebridge.infrastructure.providers.download_stream import HttpDownloadStream


def _parse_retry_after(value: str | None) -> int | None:
    if value and value.strip().isdigit():
        return int(value.strip())
    return None


class BaseStorageAPIClient:
    """Base class for storage adapters with shared HTTP handling.

    Provides common functionality for HTTP communication with drive APIs:
    - Request execution with timeout/connection error handling
    - Response status code interpretation (401, 403, 404, 429, 5xx)
    - JSON parsing with type validation
    - Streaming downloads that stay open until the caller consumes them
    - Default "not supported" implementations of optional operations

    Adapters never raise on construction. When client id, secret or
    redirect URI is missing, ``is_configured`` is False and each operation
    fails with ProviderNotConfiguredError.

    Attributes:
        _provider_name: Provider slug for logging and error messages.
        _display_name: Human-readable provider name.
        _client_id: OAuth client id.
        _client_secret: OAuth client secret.
        _redirect_uri: OAuth callback URL.
        _timeout: HTTP request timeout in seconds.
        _logger: Structured logger with provider context.
    """

    CAPABILITIES: frozenset[StorageCapability] = frozenset()

    def __init__(
        self,
        *,
        provider_name: str,
        display_name: str,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        """Initialize base storage API client.

        Args:
            provider_name: Provider slug (e.g., "google-drive", "dropbox").
            display_name: Human-readable provider name.
            client_id: OAuth client id (None = not configured).
            client_secret: OAuth client secret (None = not configured).
            redirect_uri: OAuth callback URL (None = not configured).
            timeout: HTTP request timeout in seconds.
        """
        self._provider_name = provider_name
        self._display_name = display_name
        self._client_id = client_id or ""
        self._client_secret = client_secret or ""
        self._redirect_uri = redirect_uri or ""
        self._timeout = timeout
        self._logger = structlog.get_logger(f"{provider_name}_api")
        self._event_prefix = provider_name.replace("-", "_")

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def slug(self) -> str:
        return self._provider_name

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret and self._redirect_uri)

    @property
    def capabilities(self) -> frozenset[StorageCapability]:
        return self.CAPABILITIES

    # =========================================================================
    # Gating helpers
    # =========================================================================

    def _not_configured(self, operation: str) -> Failure[ProviderError]:
        return Failure(
            error=ProviderNotConfiguredError(
                code=ErrorCode.PROVIDER_NOT_CONFIGURED,
                message=f"{self._display_name} is not configured",
                provider_name=self._provider_name,
                operation=operation,
            )
        )

    def _unsupported(
        self, capability: StorageCapability, operation: str
    ) -> Failure[ProviderError]:
        return Failure(
            error=CapabilityNotSupportedError(
                code=ErrorCode.STORAGE_CAPABILITY_NOT_SUPPORTED,
                message=(
                    f"{self._display_name} does not support {capability.value}"
                ),
                provider_name=self._provider_name,
                operation=operation,
                capability=capability,
            )
        )

    def _missing_refresh_token(self) -> Failure[ProviderError]:
        return Failure(
            error=MissingRefreshTokenError(
                code=ErrorCode.PROVIDER_REFRESH_TOKEN_MISSING,
                message="No refresh token provided",
                provider_name=self._provider_name,
                operation="refresh",
            )
        )

    # =========================================================================
    # HTTP execution
    # =========================================================================

    def _transport_failure(
        self, error: httpx.HTTPError, operation: str
    ) -> Failure[ProviderError]:
        if isinstance(error, httpx.TimeoutException):
            self._logger.warning(
                f"{self._event_prefix}_api_timeout",
                operation=operation,
                error=str(error),
            )
            message = f"{self._display_name} API request timed out"
        else:
            self._logger.warning(
                f"{self._event_prefix}_api_connection_error",
                operation=operation,
                error=str(error),
            )
            message = f"Failed to connect to {self._display_name} API: {error}"

        return Failure(
            error=ProviderUnavailableError(
                code=ErrorCode.PROVIDER_UNAVAILABLE,
                message=message,
                provider_name=self._provider_name,
                operation=operation,
                is_transient=True,
            )
        )

    async def _execute_request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        form_data: dict[str, str] | None = None,
        operation: str,
    ) -> Result[httpx.Response, ProviderError]:
        """Execute HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Absolute URL (drive APIs span several hosts).
            headers: HTTP headers including authentication.
            params: Optional query parameters.
            json_data: Optional JSON body.
            form_data: Optional form-encoded body (token endpoints).
            operation: Operation name for logging.

        Returns:
            Success(httpx.Response): Raw HTTP response on success.
            Failure(ProviderUnavailableError): On timeout or connection error.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    json=json_data,
                    data=form_data,
                )
            return Success(value=response)

        except httpx.RequestError as e:
            return self._transport_failure(e, operation)

    def _check_error_response(
        self,
        response: httpx.Response,
        operation: str,
        file_id: str | None = None,
    ) -> Failure[ProviderError] | None:
        """Check HTTP response for errors and return appropriate ProviderError.

        Args:
            response: HTTP response to check.
            operation: Operation name for logging.
            file_id: File the request targeted, reported on 404.

        Returns:
            Failure(ProviderError) if error detected, None if response is OK.
        """
        status = response.status_code

        if 200 <= status < 300:
            return None

        if status == 429:
            retry_seconds = _parse_retry_after(response.headers.get("Retry-After"))
            self._logger.warning(
                f"{self._event_prefix}_api_rate_limited",
                operation=operation,
                retry_after=retry_seconds,
            )
            return Failure(
                error=ProviderRateLimitError(
                    code=ErrorCode.PROVIDER_RATE_LIMITED,
                    message=f"{self._display_name} API rate limit exceeded",
                    provider_name=self._provider_name,
                    operation=operation,
                    retry_after=retry_seconds,
                )
            )

        if status in (401, 403):
            self._logger.warning(
                f"{self._event_prefix}_api_auth_failed",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=ProviderAuthenticationError(
                    code=ErrorCode.PROVIDER_AUTHENTICATION_FAILED,
                    message=(
                        f"{self._display_name} access token is invalid or expired"
                        if status == 401
                        else f"Access denied to {self._display_name} resource"
                    ),
                    provider_name=self._provider_name,
                    operation=operation,
                    is_token_expired=status == 401,
                )
            )

        if status == 404:
            return self._file_not_found(operation, file_id)

        if status >= 500:
            self._logger.warning(
                f"{self._event_prefix}_api_server_error",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_UNAVAILABLE,
                    message=f"{self._display_name} API server error: {status}",
                    provider_name=self._provider_name,
                    operation=operation,
                    is_transient=True,
                )
            )

        self._logger.warning(
            f"{self._event_prefix}_api_unexpected_status",
            operation=operation,
            status_code=status,
        )
        return Failure(
            error=ProviderInvalidResponseError(
                code=ErrorCode.PROVIDER_CREDENTIAL_INVALID,
                message=f"Unexpected response from {self._display_name}: {status}",
                provider_name=self._provider_name,
                operation=operation,
                response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
            )
        )

    def _file_not_found(
        self, operation: str, file_id: str | None
    ) -> Failure[ProviderError]:
        self._logger.info(
            f"{self._event_prefix}_api_not_found",
            operation=operation,
            file_id=file_id,
        )
        return Failure(
            error=StorageFileNotFoundError(
                code=ErrorCode.STORAGE_FILE_NOT_FOUND,
                message=f"File not found in {self._display_name}",
                provider_name=self._provider_name,
                operation=operation,
                file_id=file_id or "",
            )
        )

    def _parse_json_object(
        self,
        response: httpx.Response,
        operation: str,
        file_id: str | None = None,
    ) -> Result[dict[str, Any], ProviderError]:
        """Parse response as JSON object with error handling.

        Returns:
            Success(dict): Parsed JSON object.
            Failure(ProviderError): On HTTP error or invalid JSON.
        """
        error_result = self._check_error_response(response, operation, file_id)
        if error_result is not None:
            return error_result

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error(
                f"{self._event_prefix}_api_invalid_json",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.PROVIDER_CREDENTIAL_INVALID,
                    message=f"Invalid JSON response from {self._display_name}",
                    provider_name=self._provider_name,
                    operation=operation,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )

        if not isinstance(data, dict):
            self._logger.warning(
                f"{self._event_prefix}_api_unexpected_format",
                operation=operation,
                data_type=type(data).__name__,
            )
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.PROVIDER_CREDENTIAL_INVALID,
                    message=f"Expected object response from {self._display_name}",
                    provider_name=self._provider_name,
                    operation=operation,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )

        self._logger.debug(
            f"{self._event_prefix}_api_succeeded",
            operation=operation,
        )
        return Success(value=data)

    async def _execute_and_parse_object(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        form_data: dict[str, str] | None = None,
        operation: str,
        file_id: str | None = None,
    ) -> Result[dict[str, Any], ProviderError]:
        """Execute request and parse response as JSON object.

        Combines _execute_request and _parse_json_object for convenience.
        """
        result = await self._execute_request(
            method=method,
            url=url,
            headers=headers,
            params=params,
            json_data=json_data,
            form_data=form_data,
            operation=operation,
        )

        if isinstance(result, Failure):
            return result

        return self._parse_json_object(result.value, operation, file_id)

    async def _open_download(
        self,
        *,
        method: str = "GET",
        url: str,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
        operation: str,
        file_id: str,
        filename: str,
        mime_type: str,
    ) -> Result[DownloadedFile, ProviderError]:
        """Start a streaming download.

        The returned stream owns the HTTP client and response; the caller
        must consume it (``save_to`` / ``iter_bytes``) or call ``aclose``.

        Returns:
            Success(DownloadedFile): Open stream positioned at the body.
            Failure(ProviderError): Transport failure or error status.
        """
        client = httpx.AsyncClient(timeout=self._timeout)
        try:
            request = client.build_request(method, url, headers=headers, params=params)
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            await client.aclose()
            return self._transport_failure(e, operation)

        if not 200 <= response.status_code < 300:
            try:
                await response.aread()
            except httpx.HTTPError as e:
                return self._transport_failure(e, operation)
            finally:
                await response.aclose()
                await client.aclose()
            error_result = self._check_error_response(response, operation, file_id)
            if error_result is not None:
                return error_result

        self._logger.info(
            f"{self._event_prefix}_download_started",
            operation=operation,
            file_id=file_id,
        )
        return Success(
            value=HttpDownloadStream(
                client=client,
                response=response,
                filename=filename,
                mime_type=mime_type,
                provider_name=self._provider_name,
                operation=operation,
            )
        )

    # =========================================================================
    # Token helpers
    # =========================================================================

    def _token_failure(
        self, response: httpx.Response, operation: str
    ) -> Failure[ProviderError]:
        """Map a failed token endpoint response.

        Rate limits and 5xx keep their transient errors; every other status
        is a rejected grant (AuthenticationFailed on exchange,
        TokenRefreshFailed on refresh).
        """
        status = response.status_code
        if status == 429 or status >= 500:
            error_result = self._check_error_response(response, operation)
            if error_result is not None:
                return error_result

        self._logger.warning(
            f"{self._event_prefix}_token_{operation}_rejected",
            status_code=status,
        )
        if operation == "refresh":
            return Failure(
                error=ProviderTokenRefreshError(
                    code=ErrorCode.PROVIDER_TOKEN_REFRESH_FAILED,
                    message=f"{self._display_name} rejected the refresh token",
                    provider_name=self._provider_name,
                    operation=operation,
                    details={"status_code": status},
                )
            )
        return Failure(
            error=ProviderAuthenticationError(
                code=ErrorCode.PROVIDER_AUTHENTICATION_FAILED,
                message=f"{self._display_name} authentication failed",
                provider_name=self._provider_name,
                operation=operation,
                details={"status_code": status},
            )
        )

    async def _request_token(
        self,
        *,
        url: str,
        form_data: dict[str, str],
        operation: str,
        headers: dict[str, str] | None = None,
    ) -> Result[dict[str, Any], ProviderError]:
        """POST to an OAuth token endpoint and return the token payload.

        Returns:
            Success(dict): Token JSON with a non-empty ``access_token``.
            Failure(ProviderError): Rejected grant, transport failure,
                malformed body or missing access token.
        """
        self._logger.info(f"{self._event_prefix}_token_{operation}_started")

        result = await self._execute_request(
            method="POST",
            url=url,
            headers=headers,
            form_data=form_data,
            operation=operation,
        )
        if isinstance(result, Failure):
            return result

        response = result.value
        if not 200 <= response.status_code < 300:
            return self._token_failure(response, operation)

        parsed = self._parse_json_object(response, operation)
        if isinstance(parsed, Failure):
            return parsed

        if not parsed.value.get("access_token"):
            return self._missing_access_token(operation)

        self._logger.info(f"{self._event_prefix}_token_{operation}_succeeded")
        return parsed

    def _missing_access_token(self, operation: str) -> Failure[ProviderError]:
        self._logger.warning(
            f"{self._event_prefix}_token_{operation}_missing_access_token",
        )
        error_type = (
            ProviderTokenRefreshError
            if operation == "refresh"
            else ProviderAuthenticationError
        )
        return Failure(
            error=error_type(
                code=(
                    ErrorCode.PROVIDER_TOKEN_REFRESH_FAILED
                    if operation == "refresh"
                    else ErrorCode.PROVIDER_AUTHENTICATION_FAILED
                ),
                message=f"{self._display_name} did not return an access token",
                provider_name=self._provider_name,
                operation=operation,
            )
        )

    # =========================================================================
    # Required operation shared by both adapters
    # =========================================================================

    async def get_file(
        self, access_token: str, file_id: str
    ) -> Result[StorageFile, ProviderError]:
        raise NotImplementedError

    # =========================================================================
    # Optional operations (default: not supported)
    # =========================================================================

    async def search_files(
        self, access_token: str, options: SearchOptions
    ) -> Result[FileListing, ProviderError]:
        return self._unsupported(StorageCapability.SEARCH, "search_files")

    async def get_thumbnail(
        self,
        access_token: str,
        file_id: str,
        size: int = THUMBNAIL_SIZE_DEFAULT,
    ) -> Result[str | None, ProviderError]:
        return self._unsupported(StorageCapability.THUMBNAIL, "get_thumbnail")

    async def batch_get_files(
        self, access_token: str, file_ids: list[str]
    ) -> Result[list[StorageFile], ProviderError]:
        """Fetch metadata for many files concurrently, skipping failures.

        Order of the input is kept for the files that succeed.
        """
        if StorageCapability.BATCH_METADATA not in self.capabilities:
            return self._unsupported(
                StorageCapability.BATCH_METADATA, "batch_get_files"
            )
        if not self.is_configured:
            return self._not_configured("batch_get_files")

        results = await asyncio.gather(
            *(self.get_file(access_token, file_id) for file_id in file_ids)
        )

        files: list[StorageFile] = []
        for file_id, result in zip(file_ids, results, strict=True):
            match result:
                case Success(value=storage_file):
                    files.append(storage_file)
                case Failure(error=error):
                    self._logger.warning(
                        f"{self._event_prefix}_batch_get_file_skipped",
                        file_id=file_id,
                        error_code=error.code.value,
                    )
        return Success(value=files)

    async def list_shared_drives(
        self, access_token: str
    ) -> Result[list[SharedDrive], ProviderError]:
        return self._unsupported(StorageCapability.SHARED_DRIVES, "list_shared_drives")

    async def export_file(
        self,
        access_token: str,
        file_id: str,
        export_format: str | None = None,
    ) -> Result[DownloadedFile, ProviderError]:
        return self._unsupported(StorageCapability.EXPORT, "export_file")

    async def create_public_link(
        self, access_token: str, file_id: str
    ) -> Result[str, ProviderError]:
        return self._unsupported(StorageCapability.PUBLIC_LINK, "create_public_link")
