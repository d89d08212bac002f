"""Object storage operations for S3-compatible services."""

from .clients import ObjectEntry, S3ClientConfig, S3StorageClient, StorageClient
from .listing import (
    FileEntry,
    MimeTypeFilter,
    TreeNode,
    build_tree,
    find_subtree,
    locate,
    reroot,
)

__all__ = [
    "FileEntry",
    "MimeTypeFilter",
    "ObjectEntry",
    "S3ClientConfig",
    "S3StorageClient",
    "StorageClient",
    "TreeNode",
    "build_tree",
    "find_subtree",
    "locate",
    "reroot",
]
