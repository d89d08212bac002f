"""Unified entry points across all storage platforms."""

from .service import MediaStorageService, create_service

__all__ = ["MediaStorageService", "create_service"]
