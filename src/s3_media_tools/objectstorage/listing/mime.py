"""Mime type inference and the allow-list filter hook used by the tree builder."""

import mimetypes
import posixpath
from typing import Callable, Iterable, Optional

from s3_media_tools.core import settings

# Signature of the hook: object name -> mime type, "" to hide the object
MimeResolver = Callable[[str], str]

_ICONS = {
    "image": "media-image",
    "video": "media-video",
    "audio": "media-audio",
    "text": "media-text",
}


def guess_mime_type(name: str) -> str:
    """Return the mime type derived from the trailing segment of ``name``."""
    mime_type, _ = mimetypes.guess_type(posixpath.basename(name), strict=False)
    return mime_type or ""


def icon_for(mime_type: str) -> str:
    """Return the display icon hint for a mime type."""
    if mime_type == "application/pdf":
        return "media-document"
    if mime_type in ("application/zip", "application/x-zip-compressed"):
        return "media-archive"
    return _ICONS.get(mime_type.split("/", 1)[0], "media-default")


class MimeTypeFilter:
    """Resolve the mime type of an object name, hiding disallowed types.

    Names without a resolvable mime type are always hidden. The allow-list is
    only consulted when ``enabled`` is true.
    """

    def __init__(
        self,
        allowed: Optional[Iterable[str]] = None,
        enabled: Optional[bool] = None,
    ):
        self.allowed = frozenset(
            settings.allowed_mime_types if allowed is None else allowed
        )
        self.enabled = settings.hide_unsupported_types if enabled is None else enabled

    def __call__(self, name: str) -> str:
        mime_type = guess_mime_type(name)
        if not mime_type:
            return ""
        if self.enabled and mime_type not in self.allowed:
            return ""
        return mime_type
