"""Domain value objects."""

from storagebridge.domain.value_objects.credential_token_update import (
    CredentialTokenUpdate,
)
from storagebridge.domain.value_objects.media_reference import (
    ExternalMedia,
    MediaReference,
    ParsedMediaReference,
    StorageBackedMedia,
    parse_media_reference,
)

__all__ = [
    "CredentialTokenUpdate",
    "ExternalMedia",
    "MediaReference",
    "ParsedMediaReference",
    "StorageBackedMedia",
    "parse_media_reference",
]
