"""Local filesystem adapter implementing MediaFilesystemProtocol."""

import shutil
from pathlib import Path
from uuid import uuid4


class LocalMediaFilesystem:
    """pathlib/shutil implementation of MediaFilesystemProtocol.

    Attributes:
        temp_dir: Directory for short-lived download files.
    """

    def __init__(self, *, temp_dir: Path) -> None:
        self.temp_dir = temp_dir

    def exists(self, path: Path) -> bool:
        return path.exists()

    def mkdir_all(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def copy(self, source: Path, destination: Path) -> None:
        shutil.copyfile(source, destination)

    def delete(self, path: Path) -> None:
        path.unlink(missing_ok=True)

    def temp_path(self, filename: str) -> Path:
        return self.temp_dir / f"storage-{uuid4().hex}-{filename}"
