"""Access to locally held files."""

from pathlib import Path
from typing import Protocol

from s3_media_tools.core.exceptions import LocalFileMissingError


class LocalFileAccessor(Protocol):
    """Protocol for reading local files to export."""

    def exists(self, path: str) -> bool:
        ...

    def read(self, path: str) -> bytes:
        ...


class LocalFilesystemAccessor:
    """Reads files from the local filesystem."""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise LocalFileMissingError(f"Local file '{path}' could not be read: {e}")
