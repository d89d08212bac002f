"""S3-compatible storage platforms."""

from .aws_s3 import AwsS3Platform
from .backblaze_b2 import BackblazeB2Platform
from .base import ListingResult, Platform, QueryShaper, directory_query
from .cloudflare_r2 import CloudflareR2Platform
from .digitalocean_spaces import DigitalOceanSpacesPlatform
from .registry import PLATFORM_CLASSES, PlatformRegistry

__all__ = [
    "AwsS3Platform",
    "BackblazeB2Platform",
    "CloudflareR2Platform",
    "DigitalOceanSpacesPlatform",
    "ListingResult",
    "PLATFORM_CLASSES",
    "Platform",
    "PlatformRegistry",
    "QueryShaper",
    "directory_query",
]
