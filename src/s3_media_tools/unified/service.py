"""Host-facing entry points across all registered platforms.

The host addresses platforms by name. Unknown names and platform failures
are reported as structured results and diagnostics; nothing raises into the
host.
"""

from typing import Optional

import httpx

from s3_media_tools.core import get_logger
from s3_media_tools.core.exceptions import FailureReason, ValidationError
from s3_media_tools.core.observability import DiagnosticsSink, LogDiagnostics
from s3_media_tools.credentials import (
    CredentialResolver,
    FernetSecretStore,
    SecretStore,
    SettingsStore,
)
from s3_media_tools.objectstorage.listing.mime import MimeResolver, MimeTypeFilter
from s3_media_tools.platforms import ListingResult, Platform, PlatformRegistry, QueryShaper
from s3_media_tools.platforms.base import ClientFactory
from s3_media_tools.schemas import ExportCredentials, LocalFileRef, PlatformCredentials
from s3_media_tools.transfer import (
    ExportBridge,
    ExportRecordStore,
    ExportResult,
    ExternalFileReference,
    ImportBridge,
    InMemoryExportRecordStore,
    LocalFileAccessor,
    LocalFilesystemAccessor,
)

logger = get_logger(__name__)


class MediaStorageService:
    """Lists, exports, deletes and imports through named platforms."""

    def __init__(
        self,
        registry: PlatformRegistry,
        records: Optional[ExportRecordStore] = None,
        files: Optional[LocalFileAccessor] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
        mime_filter: Optional[MimeResolver] = None,
    ):
        self.registry = registry
        self.records = records if records is not None else InMemoryExportRecordStore()
        self.files = files or LocalFilesystemAccessor()
        self.diagnostics = diagnostics or LogDiagnostics()
        self.importer = ImportBridge(registry, mime_filter)

    def _platform(self, name: str) -> Optional[Platform]:
        try:
            return self.registry.get(name)
        except ValidationError as e:
            self.diagnostics.record(str(e), "error", name)
            return None

    def _bridge(self, platform: Platform) -> ExportBridge:
        return ExportBridge(platform, files=self.files, records=self.records)

    def list_directory(
        self,
        name: str,
        path: str = "",
        fields: Optional[PlatformCredentials] = None,
        query_shaper: Optional[QueryShaper] = None,
    ) -> ListingResult:
        """List ``path`` on the platform registered as ``name``."""
        platform = self._platform(name)
        if platform is None:
            return ListingResult(success=False, reason=FailureReason.NOT_THIS_PLATFORM)
        return platform.list_directory(path, fields=fields, query_shaper=query_shaper)

    def login(self, name: str, fields: Optional[PlatformCredentials] = None) -> bool:
        platform = self._platform(name)
        if platform is None:
            return False
        return platform.do_login(fields)

    def export_file(
        self,
        name: str,
        file: LocalFileRef,
        target_path: str,
        credentials: ExportCredentials,
    ) -> ExportResult:
        platform = self._platform(name)
        if platform is None:
            return ExportResult(success=False, reason=FailureReason.NOT_THIS_PLATFORM)
        return self._bridge(platform).export_file(file, target_path, credentials)

    def delete_exported_file(
        self,
        name: str,
        url: str,
        credentials: ExportCredentials,
        ref_id: str,
    ) -> bool:
        platform = self._platform(name)
        if platform is None:
            return False
        return self._bridge(platform).delete_exported_file(url, credentials, ref_id)

    def import_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> Optional[ExternalFileReference]:
        return self.importer.import_url(url, fields)


def create_service(
    settings_store: Optional[SettingsStore] = None,
    secret_store: Optional[SecretStore] = None,
    records: Optional[ExportRecordStore] = None,
    files: Optional[LocalFileAccessor] = None,
    diagnostics: Optional[DiagnosticsSink] = None,
    client_factory: Optional[ClientFactory] = None,
    http_client: Optional[httpx.Client] = None,
    user_id: Optional[str] = None,
) -> MediaStorageService:
    """Wire a service with one instance of every platform.

    Stored credentials are only resolved when a ``settings_store`` is given;
    otherwise callers pass credential fields with every call.

    Args:
        settings_store: Options and user metadata holding credentials
        secret_store: Decrypts stored secrets, Fernet with the configured key
            if omitted
        records: Export record persistence
        files: Local file access for exports
        diagnostics: Sink shared by all platforms
        client_factory: Builds storage clients, boto3 if omitted
        http_client: httpx client for public availability checks
        user_id: User whose credentials are used in user scope

    Returns:
        MediaStorageService ready for use
    """
    diagnostics = diagnostics or LogDiagnostics()
    resolver = None
    if settings_store is not None:
        resolver = CredentialResolver(settings_store, secret_store or FernetSecretStore())

    mime_filter = MimeTypeFilter()
    registry = PlatformRegistry.with_defaults(
        resolver=resolver,
        client_factory=client_factory,
        http_client=http_client,
        mime_filter=mime_filter,
        diagnostics=diagnostics,
        user_id=user_id,
    )
    logger.info("Service created", platforms=registry.names())
    return MediaStorageService(
        registry,
        records=records,
        files=files,
        diagnostics=diagnostics,
        mime_filter=mime_filter,
    )
