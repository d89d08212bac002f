"""Exception hierarchy for s3-media-tools."""

from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    """Structured failure kinds reported back to the host."""

    NOT_THIS_PLATFORM = "not_this_platform"
    CREDENTIALS_MISSING = "credentials_missing"
    TRANSPORT_FAILURE = "transport_failure"
    NOT_PUBLIC = "not_public"
    NOT_FOUND = "not_found"
    LOCAL_FILE_MISSING = "local_file_missing"
    NO_RECORD = "no_record"
    RECORD_STORE_FAILURE = "record_store_failure"


class S3MediaToolsError(Exception):
    """Base exception for all s3-media-tools errors."""

    reason: Optional[FailureReason] = None


class ValidationError(S3MediaToolsError):
    """Raised when validation fails."""

    pass


class NotThisPlatformError(S3MediaToolsError):
    """Raised when a path or URL does not belong to the platform."""

    reason = FailureReason.NOT_THIS_PLATFORM


class CredentialsMissingError(S3MediaToolsError):
    """Raised when no usable credentials are available."""

    reason = FailureReason.CREDENTIALS_MISSING


class SecretDecryptionError(CredentialsMissingError):
    """Raised when a stored secret cannot be decrypted."""

    pass


class TransportFailureError(S3MediaToolsError):
    """Raised when a storage call (list, put, delete, head) fails."""

    reason = FailureReason.TRANSPORT_FAILURE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotPublicError(S3MediaToolsError):
    """Raised when an uploaded object is not publicly reachable."""

    reason = FailureReason.NOT_PUBLIC


class LocalFileMissingError(S3MediaToolsError):
    """Raised when the local file to export does not exist."""

    reason = FailureReason.LOCAL_FILE_MISSING


class ExportRecordError(S3MediaToolsError):
    """Raised when export records cannot be read or written."""

    reason = FailureReason.RECORD_STORE_FAILURE
