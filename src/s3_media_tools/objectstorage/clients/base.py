"""Narrow storage client contract consumed by the listing and export code."""

import posixpath
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence


@dataclass(frozen=True)
class ObjectEntry:
    """One stored object as returned by a listing call."""

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None

    @property
    def name(self) -> str:
        """Trailing path segment of the key."""
        return posixpath.basename(self.key)


class StorageClient(Protocol):
    """Protocol for S3-compatible storage clients.

    Implementations raise ``TransportFailureError`` on any failed call.
    """

    def list_objects(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
    ) -> Sequence[ObjectEntry]:
        """List objects of a bucket with a single call."""
        ...

    def put_object(self, bucket: str, key: str, body: bytes) -> None:
        """Upload ``body`` under ``key``."""
        ...

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete the object stored under ``key``."""
        ...

    def head_status(self, url: str) -> int:
        """Return the HTTP status of an anonymous HEAD request to ``url``."""
        ...
