"""Common contract of all S3-compatible storage platforms.

A platform hides the per-provider differences: credential fields, client
endpoint configuration, directory marker, public URL shape and how an object
key is recovered from a URL. Listing, login and the public-availability check
are implemented once here and use the provider hooks.

Every operation resolves fresh credential fields unless the caller passes
them in; nothing is cached on the instance between calls. Failures are
recorded on the diagnostics sink and returned as structured results, they
never propagate to the caller.
"""

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from s3_media_tools.core import get_logger
from s3_media_tools.core.exceptions import (
    CredentialsMissingError,
    FailureReason,
    TransportFailureError,
)
from s3_media_tools.core.observability import DiagnosticsSink, LogDiagnostics, get_tracer
from s3_media_tools.credentials import CredentialResolver, FieldSpec
from s3_media_tools.objectstorage.clients import (
    S3ClientConfig,
    S3StorageClient,
    StorageClient,
)
from s3_media_tools.objectstorage.listing import (
    MimeTypeFilter,
    TreeNode,
    build_tree,
    locate,
)
from s3_media_tools.objectstorage.listing.mime import MimeResolver
from s3_media_tools.providers import ProviderDescriptor
from s3_media_tools.schemas import CredentialScope, PlatformCredentials

logger = get_logger(__name__)
tracer = get_tracer(__name__)

ClientFactory = Callable[[S3ClientConfig], StorageClient]

# (query, path relative to the platform directory) -> query
QueryShaper = Callable[[Dict[str, Any], str], Dict[str, Any]]

BASE_FIELDS = (
    FieldSpec("access_key", "Access key", secret=True),
    FieldSpec("secret", "Secret key", secret=True),
    FieldSpec("bucket", "Bucket"),
)


def directory_query(query: Dict[str, Any], relative_path: str) -> Dict[str, Any]:
    """Query shaper narrowing the listing to the requested directory."""
    relative_path = relative_path.strip("/")
    if not relative_path:
        return query
    query["prefix"] = relative_path + "/"
    query["delimiter"] = "/"
    return query


@dataclass
class ListingResult:
    """Outcome of a directory listing.

    ``found`` is False when the requested directory does not exist; ``tree``
    then holds the full bucket tree.
    """

    success: bool
    tree: Optional[TreeNode] = None
    found: bool = False
    reason: Optional[FailureReason] = None

    def __bool__(self) -> bool:
        return self.success


class Platform(ABC):
    """Base class of the concrete storage platforms."""

    descriptor: ProviderDescriptor
    field_specs: tuple[FieldSpec, ...] = BASE_FIELDS
    required_fields: tuple[str, ...] = ("access_key", "secret", "bucket")
    regions: tuple[str, ...] = ()

    def __init__(
        self,
        resolver: Optional[CredentialResolver] = None,
        client_factory: Optional[ClientFactory] = None,
        http_client: Optional[httpx.Client] = None,
        mime_filter: Optional[MimeResolver] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
        scope: Optional[CredentialScope] = None,
        user_id: Optional[str] = None,
    ):
        """Initialize the platform.

        Args:
            resolver: Resolves stored credentials when callers pass none
            client_factory: Builds a storage client from a client config
            http_client: httpx client for HEAD checks of the default factory
            mime_filter: Hook deciding the mime type / visibility of objects
            diagnostics: Sink for user-facing messages
            scope: Credential scope, the configured scope if omitted
            user_id: User whose credentials are used in user scope
        """
        self.resolver = resolver
        self.client_factory = client_factory or (
            lambda config: S3StorageClient(config, http_client=http_client)
        )
        self.mime_filter = mime_filter or MimeTypeFilter()
        self.diagnostics = diagnostics or LogDiagnostics()
        self.scope = scope
        self.user_id = user_id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def label(self) -> str:
        return self.descriptor.label

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    # Credentials

    def fields(self, fields: Optional[PlatformCredentials] = None) -> PlatformCredentials:
        """Return ``fields`` or the freshly resolved credential fields."""
        if fields is not None:
            return fields
        if self.resolver is None:
            return PlatformCredentials()
        return self.resolver.resolve(
            self.name, self.field_specs, scope=self.scope, user_id=self.user_id
        )

    def bucket_name(self, fields: Optional[PlatformCredentials] = None) -> str:
        return self.fields(fields).value("bucket")

    def check_credentials(self, fields: PlatformCredentials) -> None:
        """Raise ``CredentialsMissingError`` if a required field is empty."""
        missing = [name for name in self.required_fields if not fields.value(name)]
        if missing:
            raise CredentialsMissingError(
                f"No credentials set for this {self.label} connection! "
                f"Missing: {', '.join(missing)}"
            )

    # Provider hooks

    @abstractmethod
    def url_mark(self, fields: PlatformCredentials) -> str:
        """Return the marker identifying this platform's URLs."""

    @abstractmethod
    def client_config(self, fields: PlatformCredentials) -> S3ClientConfig:
        """Return the client configuration for the provider's endpoint."""

    def url_values(self, fields: PlatformCredentials) -> Dict[str, str]:
        """Return the placeholders of the public URL template."""
        return {"bucket": fields.value("bucket"), "region": fields.value("region")}

    # Public contract

    def directory(self, fields: Optional[PlatformCredentials] = None) -> str:
        """Return the directory marker, ``"/"`` if no bucket is configured."""
        fields = self.fields(fields)
        if not fields.value("bucket"):
            return "/"
        return self.url_mark(fields)

    def build_client(self, fields: Optional[PlatformCredentials] = None) -> StorageClient:
        return self.client_factory(self.client_config(self.fields(fields)))

    def public_url(self, key: str, fields: Optional[PlatformCredentials] = None) -> str:
        """Return the public URL of an object. No network call is made."""
        return self.descriptor.public_url(key, **self.url_values(self.fields(fields)))

    def is_publicly_available(
        self,
        key: str,
        client: StorageClient,
        fields: Optional[PlatformCredentials] = None,
    ) -> bool:
        """Return True if an anonymous HEAD on the public URL answers 200."""
        url = self.public_url(key, fields)
        try:
            status = client.head_status(url)
        except TransportFailureError as e:
            logger.warning("Public availability check failed", url=url, error=str(e))
            return False
        logger.info("Public availability checked", url=url, status=status)
        return status == 200

    def extract_key_from_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        """Return the object key of a public URL; other URLs are returned as is."""
        base = self.public_url("", fields)
        if url.startswith(base):
            return url[len(base):]
        return url

    def requested_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        """Return ``url`` in the form the storage client expects."""
        return url

    def is_url_compatible(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> bool:
        """Return True if ``url`` points into this platform."""
        if self.descriptor.host_hint in url:
            return True
        fields = self.fields(fields)
        return bool(fields.value("bucket")) and url.startswith(self.url_mark(fields))

    def owns_path(self, path: str, fields: Optional[PlatformCredentials] = None) -> bool:
        """Return True if ``path`` starts with this platform's directory.

        The public base URL is accepted as well, since exported files are
        known to the host by their public URL.
        """
        fields = self.fields(fields)
        if path.startswith(self.directory(fields)):
            return True
        return bool(fields.value("bucket")) and path.startswith(
            self.public_url("", fields)
        )

    def owns_url(self, url: str, fields: Optional[PlatformCredentials] = None) -> bool:
        """Return True if ``url`` addresses an object of the configured bucket."""
        return self.owns_path(url, fields)

    def relative_path(
        self, path: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        """Return ``path`` relative to the platform directory."""
        fields = self.fields(fields)
        for prefix in (self.directory(fields), self.public_url("", fields)):
            if path.startswith(prefix):
                return path[len(prefix):]
        return path

    def export_key(
        self,
        local_path: str,
        directory: str,
        fields: Optional[PlatformCredentials] = None,
    ) -> str:
        """Return the object key for uploading ``local_path`` into ``directory``."""
        prefix = self.relative_path(directory, fields).lstrip("/")
        if prefix and not prefix.endswith("/"):
            prefix += "/"
        return prefix + posixpath.basename(local_path.replace("\\", "/"))

    def do_login(self, fields: Optional[PlatformCredentials] = None) -> bool:
        """Check the credentials with a single listing call."""
        try:
            fields = self.fields(fields)
            self.check_credentials(fields)
            client = self.build_client(fields)
            client.list_objects(self.bucket_name(fields))
        except CredentialsMissingError as e:
            self.diagnostics.record(str(e), "error", self.name)
            return False
        except TransportFailureError as e:
            self._record_transport_failure(e)
            return False

        logger.info("Login successful", platform=self.name)
        return True

    def list_directory(
        self,
        path: str = "",
        fields: Optional[PlatformCredentials] = None,
        query_shaper: Optional[QueryShaper] = None,
        mime_filter: Optional[MimeResolver] = None,
    ) -> ListingResult:
        """List the bucket and return the tree of the requested directory.

        One listing call is issued; its result is treated as complete.

        Args:
            path: Requested directory, the platform directory if empty
            fields: Credential fields, resolved if omitted
            query_shaper: Strategy adjusting the listing query
            mime_filter: Hook overriding the platform's mime filter

        Returns:
            ListingResult; ``success`` is False on credential or transport
            failure and ``tree`` is then None
        """
        with tracer.start_as_current_span("platform.list_directory") as span:
            span.set_attribute("platform", self.name)
            try:
                fields = self.fields(fields)
                self.check_credentials(fields)
                directory = self.directory(fields)
                requested = path or directory
                query: Dict[str, Any] = {"bucket": self.bucket_name(fields)}
                if query_shaper is not None:
                    query = query_shaper(query, self.relative_path(requested, fields))

                client = self.build_client(fields)
                objects = client.list_objects(**query)
            except CredentialsMissingError as e:
                self.diagnostics.record(str(e), "error", self.name)
                return ListingResult(success=False, reason=e.reason)
            except TransportFailureError as e:
                self._record_transport_failure(e)
                return ListingResult(success=False, reason=e.reason)

            if not objects:
                self.diagnostics.record(
                    f"No files returned from {self.label}.", "info", self.name
                )

            tree = build_tree(
                objects,
                directory,
                public_url=lambda key: self.public_url(key, fields),
                mime_filter=mime_filter or self.mime_filter,
            )
            subtree, found = locate(tree, requested)
            span.set_attribute("found", found)

        logger.info(
            "Directory listed",
            platform=self.name,
            requested_path=requested,
            object_count=len(objects),
            found=found,
        )
        return ListingResult(
            success=True,
            tree=subtree,
            found=found,
            reason=None if found else FailureReason.NOT_FOUND,
        )

    def _record_transport_failure(self, error: TransportFailureError) -> None:
        if error.status_code is not None:
            message = (
                f"Credentials and/or bucket are not valid. {self.label} returns "
                f"with HTTP-Status {error.status_code}!"
            )
        else:
            message = f"Connection to {self.label} failed: {error}"
        self.diagnostics.record(message, "error", self.name)
