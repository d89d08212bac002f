"""Resolve bucket URLs into external file references for import."""

from dataclasses import dataclass
from typing import Optional

from s3_media_tools.core import get_logger
from s3_media_tools.objectstorage.listing.mime import MimeResolver, MimeTypeFilter
from s3_media_tools.platforms import PlatformRegistry
from s3_media_tools.schemas import PlatformCredentials

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExternalFileReference:
    """A bucket object the host manages as an external file."""

    platform: str
    key: str
    url: str
    mime_type: str


class ImportBridge:
    """Routes URLs to the owning platform and recovers the object key."""

    def __init__(
        self,
        registry: PlatformRegistry,
        mime_filter: Optional[MimeResolver] = None,
    ):
        self.registry = registry
        self.mime_filter = mime_filter or MimeTypeFilter()

    def import_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> Optional[ExternalFileReference]:
        """Return the external reference of ``url``.

        Returns:
            The reference, or None if the URL does not address an object of
            a configured bucket or the file type is not allowed
        """
        platform = self.registry.for_url(url, fields)
        if platform is None:
            logger.info("No platform claims URL", url=url)
            return None

        fields = platform.fields(fields)
        if not platform.owns_url(url, fields):
            logger.info(
                "URL is outside the configured bucket", url=url, platform=platform.name
            )
            return None

        key = platform.extract_key_from_url(platform.requested_url(url, fields), fields)
        if key == url:
            logger.info("No object key in URL", url=url, platform=platform.name)
            return None

        mime_type = self.mime_filter(key)
        if not key or not mime_type:
            logger.info("URL is not importable", url=url, platform=platform.name)
            return None

        return ExternalFileReference(
            platform=platform.name,
            key=key,
            url=platform.public_url(key, fields),
            mime_type=mime_type,
        )
