"""Filesystem port used by the media resolver.

Operations are synchronous and raise OSError on failure; the resolver
maps those to MediaResolutionError and triggers batch rollback.
"""

from pathlib import Path
from typing import Protocol


class MediaFilesystemProtocol(Protocol):
    """Minimal filesystem surface for staging media files."""

    def exists(self, path: Path) -> bool: ...

    def mkdir_all(self, path: Path) -> None:
        """Create directory and parents (no error if it exists)."""
        ...

    def copy(self, source: Path, destination: Path) -> None: ...

    def delete(self, path: Path) -> None:
        """Delete a file (no error if it is already gone)."""
        ...

    def temp_path(self, filename: str) -> Path:
        """Return a fresh, unused path in the temp directory for ``filename``."""
        ...
