"""Registry of the platforms wired into a process."""

from typing import Iterable, Iterator, Optional

from s3_media_tools.core import get_logger
from s3_media_tools.core.exceptions import ValidationError
from s3_media_tools.schemas import PlatformCredentials

from .aws_s3 import AwsS3Platform
from .backblaze_b2 import BackblazeB2Platform
from .base import Platform
from .cloudflare_r2 import CloudflareR2Platform
from .digitalocean_spaces import DigitalOceanSpacesPlatform

logger = get_logger(__name__)

PLATFORM_CLASSES: tuple[type[Platform], ...] = (
    AwsS3Platform,
    BackblazeB2Platform,
    CloudflareR2Platform,
    DigitalOceanSpacesPlatform,
)


class PlatformRegistry:
    """Holds platform instances by name, in registration order."""

    def __init__(self, platforms: Iterable[Platform] = ()):
        self._platforms: dict[str, Platform] = {}
        for platform in platforms:
            self.register(platform)

    @classmethod
    def with_defaults(cls, **kwargs) -> "PlatformRegistry":
        """Create a registry holding one instance of every platform.

        Keyword arguments are passed to each platform's constructor.
        """
        return cls(platform_class(**kwargs) for platform_class in PLATFORM_CLASSES)

    def register(self, platform: Platform) -> None:
        self._platforms[platform.name] = platform
        logger.debug("Platform registered", platform=platform.name)

    def get(self, name: str) -> Platform:
        """Return the platform registered under ``name``.

        Raises:
            ValidationError: If no such platform is registered
        """
        try:
            return self._platforms[name]
        except KeyError:
            raise ValidationError(
                f"Unknown platform '{name}'. Available: {', '.join(self.names())}"
            )

    def names(self) -> list[str]:
        return list(self._platforms)

    def __iter__(self) -> Iterator[Platform]:
        return iter(self._platforms.values())

    def __contains__(self, name: object) -> bool:
        return name in self._platforms

    def __len__(self) -> int:
        return len(self._platforms)

    def for_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> Optional[Platform]:
        """Return the first platform that claims ``url``."""
        for platform in self:
            if platform.is_url_compatible(url, fields):
                return platform
        return None
