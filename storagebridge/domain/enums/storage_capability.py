"""Optional storage provider capabilities.

Every adapter supports identity, listing, metadata, download and
download-url. The members below are the optional extensions; an adapter
declares the ones it implements through its ``capabilities`` property and
callers check membership before invoking the matching operation.
"""

from enum import Enum


class StorageCapability(str, Enum):
    """Optional operations a storage adapter may implement."""

    SEARCH = "search"
    THUMBNAIL = "thumbnail"
    BATCH_METADATA = "batch_metadata"
    SHARED_DRIVES = "shared_drives"
    EXPORT = "export"
    PUBLIC_LINK = "public_link"
