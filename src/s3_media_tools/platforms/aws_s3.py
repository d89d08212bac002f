"""AWS S3 platform."""

from typing import Optional

from s3_media_tools.credentials import FieldSpec
from s3_media_tools.objectstorage.clients import S3ClientConfig
from s3_media_tools.providers import AWS_S3
from s3_media_tools.schemas import PlatformCredentials

from .base import BASE_FIELDS, Platform

URL_SCHEME = "aws-s3://"


class AwsS3Platform(Platform):
    """Amazon's own S3, addressed by bucket and region."""

    descriptor = AWS_S3
    field_specs = BASE_FIELDS + (FieldSpec("region", "Region", default="us-east-1"),)
    required_fields = ("access_key", "secret", "bucket", "region")
    regions = (
        "us-east-1",
        "us-east-2",
        "us-west-1",
        "us-west-2",
        "ca-central-1",
        "sa-east-1",
        "eu-central-1",
        "eu-central-2",
        "eu-west-1",
        "eu-west-2",
        "eu-west-3",
        "eu-north-1",
        "eu-south-1",
        "ap-south-1",
        "ap-northeast-1",
        "ap-northeast-2",
        "ap-northeast-3",
        "ap-southeast-1",
        "ap-southeast-2",
        "af-south-1",
        "me-south-1",
    )

    def url_mark(self, fields: PlatformCredentials) -> str:
        return f"{URL_SCHEME}{fields.value('bucket')}/"

    def client_config(self, fields: PlatformCredentials) -> S3ClientConfig:
        return S3ClientConfig(
            access_key_id=fields.value("access_key") or None,
            secret_access_key=fields.value("secret") or None,
            region_name=fields.value("region", "us-east-1"),
        )

    def requested_url(
        self, url: str, fields: Optional[PlatformCredentials] = None
    ) -> str:
        fields = self.fields(fields)
        mark = self.url_mark(fields)
        if url.startswith(mark):
            return url[len(mark):]
        return url
