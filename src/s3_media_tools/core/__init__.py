"""Core utilities and shared components for s3-media-tools."""

from .config import settings
from .exceptions import S3MediaToolsError, ValidationError
from .observability import get_logger

__all__ = ["settings", "S3MediaToolsError", "ValidationError", "get_logger"]
