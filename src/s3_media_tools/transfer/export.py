"""Export local files to a platform bucket and delete exported files.

An export uploads the file, verifies that the object is publicly reachable
and only then records the object key against the host's file reference.
Objects failing the public check stay in the bucket but are not recorded.

Neither operation retries; every failure is recorded on the diagnostics sink
and reported through the return value.
"""

from dataclasses import dataclass
from typing import Optional

from s3_media_tools.core import get_logger
from s3_media_tools.core.exceptions import (
    CredentialsMissingError,
    ExportRecordError,
    FailureReason,
    LocalFileMissingError,
    NotPublicError,
    NotThisPlatformError,
    S3MediaToolsError,
    TransportFailureError,
)
from s3_media_tools.core.observability import get_tracer
from s3_media_tools.platforms import Platform
from s3_media_tools.schemas import ExportCredentials, LocalFileRef

from .local_files import LocalFileAccessor, LocalFilesystemAccessor
from .records import OBJECT_KEY_FIELD, ExportRecordStore, InMemoryExportRecordStore

logger = get_logger(__name__)
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export; ``url`` is the public URL on success."""

    success: bool
    url: Optional[str] = None
    key: Optional[str] = None
    reason: Optional[FailureReason] = None

    def __bool__(self) -> bool:
        return self.success


class ExportBridge:
    """Exports files to, and deletes exported files from, one platform."""

    def __init__(
        self,
        platform: Platform,
        files: Optional[LocalFileAccessor] = None,
        records: Optional[ExportRecordStore] = None,
    ):
        self.platform = platform
        self.files = files or LocalFilesystemAccessor()
        self.records = records if records is not None else InMemoryExportRecordStore()

    @property
    def diagnostics(self):
        return self.platform.diagnostics

    def export_file(
        self,
        file: LocalFileRef,
        target_path: str,
        credentials: ExportCredentials,
    ) -> ExportResult:
        """Upload a local file into the target directory of the bucket.

        Args:
            file: Host reference and local path of the file
            target_path: Directory marker URL to upload into
            credentials: Credential fields and optional target directory

        Returns:
            ExportResult with the public URL of the uploaded object
        """
        platform = self.platform
        fields = credentials.to_platform_credentials()

        with tracer.start_as_current_span("export.export_file") as span:
            span.set_attribute("platform", platform.name)
            try:
                if not platform.owns_path(target_path, fields):
                    raise NotThisPlatformError(
                        f"Given path is not a {platform.label} URL."
                    )
                if not self.files.exists(file.path):
                    raise LocalFileMissingError(
                        f"Local file '{file.path}' does not exist."
                    )
                platform.check_credentials(fields)

                key = platform.export_key(
                    file.path, credentials.directory or target_path, fields
                )
                bucket = platform.bucket_name(fields)
                client = platform.build_client(fields)

                logger.info(
                    "Exporting file",
                    ref=file.ref_id,
                    platform=platform.name,
                    bucket=bucket,
                    key=key,
                )
                client.put_object(bucket, key, self.files.read(file.path))

                if not platform.is_publicly_available(key, client, fields):
                    raise NotPublicError(
                        f"File would not be public available on your {platform.label} "
                        "bucket. Check the settings in the bucket to use the export "
                        "of files."
                    )

                self.records.set(file.ref_id, OBJECT_KEY_FIELD, key)
            except S3MediaToolsError as e:
                context = target_path
                if isinstance(e, TransportFailureError) and e.status_code is not None:
                    context = f"{target_path} (HTTP-Status {e.status_code})"
                self.diagnostics.record(str(e), "error", context)
                return ExportResult(success=False, reason=e.reason)

            url = platform.public_url(key, fields)

        logger.info("File exported", ref=file.ref_id, platform=platform.name, url=url)
        return ExportResult(success=True, url=url, key=key)

    def delete_exported_file(
        self,
        url: str,
        credentials: ExportCredentials,
        ref_id: str,
    ) -> bool:
        """Delete the object recorded for ``ref_id`` from the bucket.

        Returns:
            True if the delete call succeeded
        """
        platform = self.platform
        fields = credentials.to_platform_credentials()

        if not platform.owns_path(url, fields):
            self.diagnostics.record(
                f"Given path is not a {platform.label} URL.", "error", url
            )
            return False

        try:
            key = self.records.get(ref_id, OBJECT_KEY_FIELD)
        except ExportRecordError as e:
            self.diagnostics.record(str(e), "error", url)
            return False
        if not key:
            logger.info("No export record for reference", ref=ref_id)
            return False

        try:
            platform.check_credentials(fields)
            client = platform.build_client(fields)
            client.delete_object(platform.bucket_name(fields), key)
        except (CredentialsMissingError, TransportFailureError) as e:
            self.diagnostics.record(
                f"File could not be deleted! Error: {e}", "error", url
            )
            return False

        logger.info("Exported file deleted", ref=ref_id, platform=platform.name, key=key)
        return True
