"""Directory listing and media export for S3-compatible object storage.

This package turns flat bucket listings into navigable directory trees and
moves files between a host's local storage and buckets on AWS S3, Backblaze
B2, Cloudflare R2 and DigitalOcean Spaces.

Key Features:
    - Directory trees from flat object key listings
    - Per-provider endpoints, public URLs and directory markers
    - Export of local files with public availability check
    - Import of bucket URLs as external file references
    - Stored credentials in global, per-user or manual scope
    - CLI interface

Recommended Usage:
    Use the unified service for most operations:

    >>> from s3_media_tools import create_service, PlatformCredentials
    >>> service = create_service()
    >>> fields = PlatformCredentials.from_values(
    ...     {"access_key": "...", "secret": "...", "bucket": "media", "region": "eu-west-1"}
    ... )
    >>> result = service.list_directory("aws-s3", "aws-s3://media/photos/", fields)

Advanced Usage:
    Import specific modules for advanced operations:

    >>> from s3_media_tools.objectstorage import build_tree, reroot
    >>> from s3_media_tools.platforms import CloudflareR2Platform
"""

__version__ = "0.1.0"

from .objectstorage import (
    FileEntry,
    ObjectEntry,
    S3ClientConfig,
    TreeNode,
    build_tree,
    reroot,
)
from .platforms import (
    AwsS3Platform,
    BackblazeB2Platform,
    CloudflareR2Platform,
    DigitalOceanSpacesPlatform,
    ListingResult,
    Platform,
    PlatformRegistry,
)
from .schemas import (
    CredentialField,
    ExportCredentials,
    LocalFileRef,
    PlatformCredentials,
)
from .transfer import ExportResult, ExternalFileReference

# Unified interface (recommended)
from .unified import MediaStorageService, create_service

__all__ = [
    # Schemas
    "CredentialField",
    "ExportCredentials",
    "LocalFileRef",
    "PlatformCredentials",
    # Unified interface
    "MediaStorageService",
    "create_service",
    "ExportResult",
    "ExternalFileReference",
    "ListingResult",
    # Platforms
    "AwsS3Platform",
    "BackblazeB2Platform",
    "CloudflareR2Platform",
    "DigitalOceanSpacesPlatform",
    "Platform",
    "PlatformRegistry",
    # Listing
    "FileEntry",
    "ObjectEntry",
    "S3ClientConfig",
    "TreeNode",
    "build_tree",
    "reroot",
]
