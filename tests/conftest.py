"""Test configuration and fixtures for s3-media-tools."""

from typing import Optional

import httpx
import pytest

from s3_media_tools.core.exceptions import TransportFailureError
from s3_media_tools.core.observability import LogDiagnostics
from s3_media_tools.credentials import FernetSecretStore, InMemorySettingsStore
from s3_media_tools.objectstorage.clients import ObjectEntry
from s3_media_tools.schemas import PlatformCredentials


class FakeStorageClient:
    """In-memory storage client recording every call."""

    def __init__(
        self,
        objects: Optional[list[ObjectEntry]] = None,
        head_status_code: int = 200,
        error: Optional[TransportFailureError] = None,
    ):
        self.objects = list(objects or [])
        self.head_status_code = head_status_code
        self.error = error
        self.calls: list[tuple] = []
        self.uploaded: dict[str, bytes] = {}

    def list_objects(self, bucket, prefix=None, delimiter=None):
        self.calls.append(("list", bucket, prefix, delimiter))
        if self.error is not None:
            raise self.error
        return [obj for obj in self.objects if not prefix or obj.key.startswith(prefix)]

    def put_object(self, bucket, key, body):
        self.calls.append(("put", bucket, key))
        if self.error is not None:
            raise self.error
        self.uploaded[key] = body

    def delete_object(self, bucket, key):
        self.calls.append(("delete", bucket, key))
        if self.error is not None:
            raise self.error
        self.uploaded.pop(key, None)

    def head_status(self, url):
        self.calls.append(("head", url))
        return self.head_status_code


class RecordingClientFactory:
    """Client factory handing out one fake client and keeping the configs."""

    def __init__(self, client: FakeStorageClient):
        self.client = client
        self.configs = []

    def __call__(self, config):
        self.configs.append(config)
        return self.client


@pytest.fixture
def fake_client():
    """A fake storage client with a small bucket listing."""
    return FakeStorageClient(
        objects=[
            ObjectEntry("a.txt", size=3),
            ObjectEntry("dir1/b.txt", size=5),
            ObjectEntry("dir1/dir2/c.txt", size=7),
        ]
    )


@pytest.fixture
def client_factory(fake_client):
    return RecordingClientFactory(fake_client)


@pytest.fixture
def diagnostics():
    return LogDiagnostics()


@pytest.fixture
def secret_store():
    """Fernet secret store with a fresh key."""
    return FernetSecretStore(FernetSecretStore.generate_key())


@pytest.fixture
def settings_store():
    return InMemorySettingsStore()


@pytest.fixture
def aws_fields():
    return PlatformCredentials.from_values(
        {
            "access_key": "test_key",
            "secret": "test_secret",
            "bucket": "media",
            "region": "us-east-1",
        }
    )


@pytest.fixture
def b2_fields():
    return PlatformCredentials.from_values(
        {
            "access_key": "key",
            "secret": "secret",
            "bucket": "media",
            "region": "eu-central-003",
        }
    )


@pytest.fixture
def r2_fields():
    return PlatformCredentials.from_values(
        {"access_key": "key", "secret": "secret", "bucket": "media", "account_id": "abc123"}
    )


@pytest.fixture
def do_fields():
    return PlatformCredentials.from_values(
        {"access_key": "key", "secret": "secret", "bucket": "media", "region": "fra1"}
    )


@pytest.fixture
def head_client():
    """Factory for httpx clients answering every request with one status."""

    def make(status_code: int, seen: Optional[list] = None) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            return httpx.Response(status_code)

        return httpx.Client(transport=httpx.MockTransport(handler))

    return make
