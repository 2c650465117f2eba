"""Streaming HTTP body exposed as a DownloadedFile.

Wraps an httpx response opened with ``stream=True``. The wrapper owns both
the response and its client and releases them once the body is consumed or
``aclose`` is called.
"""

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import structlog

from storagebridge.core.constants import DOWNLOAD_CHUNK_SIZE
from storagebridge.core.enums import ErrorCode
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.errors import MediaResolutionError, ProviderUnavailableError

logger = structlog.get_logger(__name__)


class HttpDownloadStream:
    """DownloadedFile backed by a streaming httpx response."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        response: httpx.Response,
        filename: str,
        mime_type: str,
        provider_name: str,
        operation: str,
    ) -> None:
        self._client = client
        self._response = response
        self._filename = filename
        self._mime_type = mime_type
        self._provider_name = provider_name
        self._operation = operation
        self._closed = False

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def mime_type(self) -> str:
        return self._mime_type

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                yield chunk
        finally:
            await self.aclose()

    async def save_to(self, destination: Path) -> Result[int, DomainError]:
        """Write the body to ``destination`` and close the stream.

        A partially written file is left in place; the caller owns cleanup
        of ``destination``.
        """
        written = 0
        try:
            with destination.open("wb") as handle:
                async for chunk in self._response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                    handle.write(chunk)
                    written += len(chunk)
        except httpx.HTTPError as e:
            logger.warning(
                "download_stream_interrupted",
                provider=self._provider_name,
                operation=self._operation,
                error=str(e),
            )
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_UNAVAILABLE,
                    message=f"Download interrupted: {e}",
                    provider_name=self._provider_name,
                    operation=self._operation,
                    is_transient=True,
                )
            )
        except OSError as e:
            logger.error(
                "download_stream_write_failed",
                provider=self._provider_name,
                path=str(destination),
                error=str(e),
            )
            return Failure(
                error=MediaResolutionError(
                    code=ErrorCode.MEDIA_RESOLUTION_FAILED,
                    message=f"Failed to write download: {e}",
                    path=str(destination),
                )
            )
        finally:
            await self.aclose()

        return Success(value=written)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        await self._client.aclose()
