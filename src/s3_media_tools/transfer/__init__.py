"""Export of local files to buckets and import of bucket objects."""

from .export import ExportBridge, ExportResult
from .imports import ExternalFileReference, ImportBridge
from .local_files import LocalFileAccessor, LocalFilesystemAccessor
from .records import (
    OBJECT_KEY_FIELD,
    ExportRecordStore,
    InMemoryExportRecordStore,
    JsonFileExportRecordStore,
)

__all__ = [
    "ExportBridge",
    "ExportRecordStore",
    "ExportResult",
    "ExternalFileReference",
    "ImportBridge",
    "InMemoryExportRecordStore",
    "JsonFileExportRecordStore",
    "LocalFileAccessor",
    "LocalFilesystemAccessor",
    "OBJECT_KEY_FIELD",
]
