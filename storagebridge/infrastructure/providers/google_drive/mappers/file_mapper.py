"""Google Drive file mapper.

Converts Drive API v3 file resources to StorageFile.

Drive File Resource (fields requested by the adapter):
    {
        "id": "1AbC...",
        "name": "beach.jpg",
        "mimeType": "image/jpeg",
        "size": "204800",
        "modifiedTime": "2025-01-31T10:00:00.000Z",
        "thumbnailLink": "https://lh3.googleusercontent.com/...=s220",
        "webContentLink": "https://drive.google.com/uc?id=...&export=download"
    }

Note: ``size`` is a string and is absent for folders and Workspace files.

Reference:
    - https://developers.google.com/drive/api/reference/rest/v3/files
"""

from typing import Any

import structlog

from storagebridge.domain.protocols.storage_provider_protocol import StorageFile
from storagebridge.infrastructure.providers.google_drive.drive_utils import (
    FOLDER_MIME_TYPE,
)

logger = structlog.get_logger(__name__)


class GoogleDriveFileMapper:
    """Mapper for converting Drive file resources to StorageFile.

    Thread-safe: No mutable state, can be shared across requests.
    """

    def map_file(self, data: dict[str, Any]) -> StorageFile | None:
        """Map one Drive file resource.

        Returns:
            StorageFile, or None when the resource has no id.
        """
        file_id = data.get("id")
        if not file_id:
            logger.warning("google_drive_file_mapping_skipped", reason="missing_id")
            return None

        mime_type = data.get("mimeType") or ""
        return StorageFile(
            id=file_id,
            name=data.get("name") or "",
            mime_type=mime_type,
            size_bytes=self._parse_size(data.get("size")),
            modified_time=data.get("modifiedTime") or "",
            is_folder=mime_type == FOLDER_MIME_TYPE,
            thumbnail_url=data.get("thumbnailLink") or None,
            web_content_link=data.get("webContentLink") or None,
        )

    def map_files(self, items: list[dict[str, Any]]) -> list[StorageFile]:
        return [f for f in (self.map_file(item) for item in items) if f is not None]

    @staticmethod
    def _parse_size(value: Any) -> int:
        try:
            return int(value) if value is not None else 0
        except (TypeError, ValueError):
            return 0
