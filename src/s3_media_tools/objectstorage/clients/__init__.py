"""Storage client contract and the boto3-backed implementation."""

from .base import ObjectEntry, StorageClient
from .s3_client import S3ClientConfig, S3StorageClient

__all__ = ["ObjectEntry", "StorageClient", "S3ClientConfig", "S3StorageClient"]
