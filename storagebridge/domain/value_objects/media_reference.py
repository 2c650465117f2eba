"""Post media references.

A MediaReference is supplied by the publishing pipeline. Its ``path`` is
either an external URL (published as-is) or a structured pointer into a
connected drive: ``integration/{credentialId}/file/{fileId}``.

``parse_media_reference`` classifies a path once, at the resolver boundary,
into the typed sum ``ExternalMedia | StorageBackedMedia``.
"""

import re
from dataclasses import dataclass
from uuid import UUID

from storagebridge.domain.enums import MediaType

_STORAGE_REFERENCE_PATTERN = re.compile(
    r"^/?integration/(?P<credential_id>[^/]+)/file/(?P<file_id>[^/]+)$"
)


@dataclass(frozen=True, kw_only=True)
class MediaReference:
    """Media attached to a post.

    Attributes:
        path: External URL, storage reference, public URL or local path.
        type: Media type, None until known.
        resolved_as_public_url: True when ``path`` must be fetched over HTTP
            rather than opened as a local file.
    """

    path: str
    type: MediaType | None = None
    resolved_as_public_url: bool = False


@dataclass(frozen=True, kw_only=True)
class ExternalMedia:
    """Reference that is not backed by a connected drive."""

    url: str


@dataclass(frozen=True, kw_only=True)
class StorageBackedMedia:
    """Reference to one file inside a connected drive.

    Attributes:
        credential_id: Raw credential id segment from the path.
        file_id: Provider file identifier.
    """

    credential_id: str
    file_id: str

    def credential_uuid(self) -> UUID | None:
        """Credential id as a UUID, or None when the segment is malformed."""
        try:
            return UUID(self.credential_id)
        except ValueError:
            return None


type ParsedMediaReference = ExternalMedia | StorageBackedMedia


def parse_media_reference(path: str) -> ParsedMediaReference:
    """Classify a media path.

    Args:
        path: MediaReference.path as supplied by the caller.

    Returns:
        StorageBackedMedia when the path matches the storage reference
        pattern, ExternalMedia otherwise.
    """
    match = _STORAGE_REFERENCE_PATTERN.match(path)
    if match is None:
        return ExternalMedia(url=path)
    return StorageBackedMedia(
        credential_id=match.group("credential_id"),
        file_id=match.group("file_id"),
    )
