"""Dropbox path, link and thumbnail helpers (pure, no I/O)."""

import mimetypes
import re
from pathlib import PurePosixPath

from storagebridge.core.constants import SUPPORTED_MEDIA_EXTENSIONS

FOLDER_MIME_TYPE = "application/vnd.dropbox.folder"

_DL_FLAG_PATTERN = re.compile(r"([?&])dl=0\b")

# (max requested edge, Dropbox ThumbnailSize tag), ascending
_THUMBNAIL_BUCKETS: tuple[tuple[int, str], ...] = (
    (32, "w32h32"),
    (64, "w64h64"),
    (128, "w128h128"),
    (256, "w256h256"),
    (480, "w480h320"),
    (640, "w640h480"),
    (960, "w960h640"),
    (1024, "w1024h768"),
)
_LARGEST_THUMBNAIL = "w2048h1536"


def is_supported_media_file(name: str) -> bool:
    return PurePosixPath(name.lower()).suffix in SUPPORTED_MEDIA_EXTENSIONS


def guess_mime_type(name: str) -> str:
    """MIME type from the file extension ("application/octet-stream" if unknown)."""
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or "application/octet-stream"


def to_direct_link(shared_url: str) -> str:
    """Turn a shared link into a direct-download URL.

    Example:
        >>> to_direct_link("https://www.dropbox.com/s/abc/cat.jpg?dl=0")
        'https://dl.dropboxusercontent.com/s/abc/cat.jpg?dl=1'
    """
    direct = shared_url.replace("www.dropbox.com", "dl.dropboxusercontent.com")
    return _DL_FLAG_PATTERN.sub(r"\1dl=1", direct)


def thumbnail_size_tag(size: int) -> str:
    """Smallest Dropbox thumbnail bucket that covers ``size`` pixels."""
    for limit, tag in _THUMBNAIL_BUCKETS:
        if size <= limit:
            return tag
    return _LARGEST_THUMBNAIL
