"""Backblaze B2 platform, reached through its S3-compatible API."""

from typing import Optional

from s3_media_tools.credentials import FieldSpec
from s3_media_tools.objectstorage.clients import S3ClientConfig
from s3_media_tools.providers import BACKBLAZE_B2
from s3_media_tools.schemas import PlatformCredentials

from .base import BASE_FIELDS, Platform


class BackblazeB2Platform(Platform):
    """Backblaze B2. The public bucket URL doubles as directory marker."""

    descriptor = BACKBLAZE_B2
    field_specs = BASE_FIELDS + (FieldSpec("region", "Region"),)
    required_fields = ("access_key", "secret", "bucket", "region")
    regions = ("us-west-004", "us-east-005", "eu-central-003", "ap-southeast-002")

    def url_mark(self, fields: PlatformCredentials) -> str:
        return self.descriptor.public_url("", **self.url_values(fields))

    def client_config(self, fields: PlatformCredentials) -> S3ClientConfig:
        region = fields.value("region")
        return S3ClientConfig(
            access_key_id=fields.value("access_key") or None,
            secret_access_key=fields.value("secret") or None,
            region_name=region,
            endpoint_url=f"https://s3.{region}.backblazeb2.com",
        )

    def requested_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        return url.replace(self.url_mark(self.fields(fields)), "")
