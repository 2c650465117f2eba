"""Post media types."""

from enum import Enum


class MediaType(str, Enum):
    """Kind of media attached to a post."""

    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_mime_type(cls, mime_type: str) -> "MediaType":
        """Infer media type from a MIME type.

        Anything that is not ``video/*`` is treated as an image.
        """
        if mime_type.lower().startswith("video/"):
            return cls.VIDEO
        return cls.IMAGE
