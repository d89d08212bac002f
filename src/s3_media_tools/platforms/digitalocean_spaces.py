"""DigitalOcean Spaces platform."""

from s3_media_tools.credentials import FieldSpec
from s3_media_tools.objectstorage.clients import S3ClientConfig
from s3_media_tools.providers import DIGITALOCEAN_SPACES
from s3_media_tools.schemas import PlatformCredentials

from .base import BASE_FIELDS, Platform


class DigitalOceanSpacesPlatform(Platform):
    """DigitalOcean Spaces; buckets live on a regional endpoint."""

    descriptor = DIGITALOCEAN_SPACES
    field_specs = BASE_FIELDS + (FieldSpec("region", "Region"),)
    required_fields = ("access_key", "secret", "bucket", "region")
    regions = (
        "nyc3",
        "sfo2",
        "sfo3",
        "ams3",
        "sgp1",
        "lon1",
        "fra1",
        "tor1",
        "blr1",
        "syd1",
        "atl1",
    )

    def url_mark(self, fields: PlatformCredentials) -> str:
        return self.descriptor.public_url("", **self.url_values(fields))

    def client_config(self, fields: PlatformCredentials) -> S3ClientConfig:
        region = fields.value("region")
        return S3ClientConfig(
            access_key_id=fields.value("access_key") or None,
            secret_access_key=fields.value("secret") or None,
            region_name=region,
            endpoint_url=f"https://{region}.digitaloceanspaces.com",
        )
