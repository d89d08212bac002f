"""Cloudflare R2 platform.

R2 has no regions; the endpoint is derived from the account id and the EU
jurisdiction flag, and requires path-style addressing. Objects exported to
R2 are never reported as publicly available, so exports to R2 are rejected.
"""

from typing import Dict, Optional

from s3_media_tools.core import get_logger
from s3_media_tools.credentials import FieldSpec
from s3_media_tools.objectstorage.clients import S3ClientConfig, StorageClient
from s3_media_tools.providers import CLOUDFLARE_R2
from s3_media_tools.schemas import PlatformCredentials

from .base import BASE_FIELDS, Platform

logger = get_logger(__name__)

URL_SCHEME = "cloudflare-r2://"
DASHBOARD_URL = "https://dash.cloudflare.com/"


class CloudflareR2Platform(Platform):
    """Cloudflare R2, addressed by account id and bucket."""

    descriptor = CLOUDFLARE_R2
    field_specs = BASE_FIELDS + (
        FieldSpec("account_id", "Account ID"),
        FieldSpec("eu", "EU jurisdiction"),
    )
    required_fields = ("access_key", "secret", "bucket", "account_id")

    def url_values(self, fields: PlatformCredentials) -> Dict[str, str]:
        return {
            "account_id": fields.value("account_id"),
            "jurisdiction": ".eu" if fields.flag("eu") else "",
            "bucket": fields.value("bucket"),
        }

    def endpoint(self, fields: PlatformCredentials) -> str:
        values = self.url_values(fields)
        return f"https://{values['account_id']}{values['jurisdiction']}.r2.cloudflarestorage.com"

    def url_mark(self, fields: PlatformCredentials) -> str:
        return f"{URL_SCHEME}{fields.value('account_id')}/{fields.value('bucket')}/"

    def client_config(self, fields: PlatformCredentials) -> S3ClientConfig:
        return S3ClientConfig(
            access_key_id=fields.value("access_key") or None,
            secret_access_key=fields.value("secret") or None,
            region_name="auto",
            endpoint_url=self.endpoint(fields),
            path_style=True,
        )

    def dashboard_url(self, fields: PlatformCredentials) -> str:
        """Return the dashboard URL prefix of objects in the bucket."""
        return (
            f"{DASHBOARD_URL}{fields.value('account_id')}/r2/"
            f"{'eu/' if fields.flag('eu') else ''}"
            f"buckets/{fields.value('bucket')}/objects/"
        )

    def is_publicly_available(
        self,
        key: str,
        client: StorageClient,
        fields: Optional[PlatformCredentials] = None,
    ) -> bool:
        logger.info("Public availability is not verified for R2", key=key)
        return False

    def extract_key_from_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        fields = self.fields(fields)
        for prefix in (self.public_url("", fields), self.dashboard_url(fields)):
            if url.startswith(prefix):
                return url[len(prefix):]
        return url

    def requested_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        fields = self.fields(fields)
        mark = self.url_mark(fields)
        if url.startswith(mark):
            return url[len(mark):]
        return url

    def is_url_compatible(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> bool:
        if url.startswith(DASHBOARD_URL):
            return True
        return super().is_url_compatible(url, fields)

    def owns_url(self, url: str, fields: Optional[PlatformCredentials] = None) -> bool:
        fields = self.fields(fields)
        if fields.has("bucket", "account_id") and url.startswith(
            self.dashboard_url(fields)
        ):
            return True
        return super().owns_url(url, fields)
