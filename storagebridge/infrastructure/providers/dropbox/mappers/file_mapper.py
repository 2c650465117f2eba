"""Dropbox metadata mapper.

Converts Dropbox API v2 ``Metadata`` entries to StorageFile.

Dropbox Metadata Structure:
    {
        ".tag": "file",
        "id": "id:a4ayc_80_OEAAAAAAAAAXw",
        "name": "beach.jpg",
        "path_display": "/Photos/beach.jpg",
        "size": 204800,
        "server_modified": "2025-01-31T10:00:00Z"
    }

Dropbox reports no MIME type; it is guessed from the extension.

Reference:
    - https://www.dropbox.com/developers/documentation/http/documentation#files-get_metadata
"""

from typing import Any

import structlog

from storagebridge.domain.protocols.storage_provider_protocol import StorageFile
from storagebridge.infrastructure.providers.dropbox.dropbox_utils import (
    FOLDER_MIME_TYPE,
    guess_mime_type,
)

logger = structlog.get_logger(__name__)


class DropboxFileMapper:
    """Mapper for Dropbox file and folder metadata."""

    def map_entry(self, entry: dict[str, Any]) -> StorageFile | None:
        """Map a file or folder entry; None for deleted entries or missing ids."""
        tag = entry.get(".tag")
        entry_id = entry.get("id")
        if tag not in ("file", "folder") or not entry_id:
            logger.debug("dropbox_entry_mapping_skipped", tag=tag)
            return None

        name = entry.get("name") or ""
        path = entry.get("path_display") or None

        if tag == "folder":
            return StorageFile(
                id=entry_id,
                name=name,
                mime_type=FOLDER_MIME_TYPE,
                is_folder=True,
                path=path,
            )

        return StorageFile(
            id=entry_id,
            name=name,
            mime_type=guess_mime_type(name),
            size_bytes=int(entry.get("size") or 0),
            modified_time=entry.get("server_modified") or "",
            path=path,
        )
