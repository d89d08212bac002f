"""Tests for exporting, deleting and importing files."""

import json

import pytest

from s3_media_tools.core.exceptions import (
    ExportRecordError,
    FailureReason,
    TransportFailureError,
)
from s3_media_tools.objectstorage.listing import MimeTypeFilter
from s3_media_tools.platforms import (
    AwsS3Platform,
    BackblazeB2Platform,
    CloudflareR2Platform,
    DigitalOceanSpacesPlatform,
    PlatformRegistry,
)
from s3_media_tools.schemas import ExportCredentials, LocalFileRef, PlatformCredentials
from s3_media_tools.transfer import (
    ExportBridge,
    ImportBridge,
    InMemoryExportRecordStore,
    JsonFileExportRecordStore,
)

from conftest import FakeStorageClient, RecordingClientFactory

B2_VALUES = {
    "access_key": "key",
    "secret": "secret",
    "bucket": "media",
    "region": "eu-central-003",
}
B2_BASE = "https://media.s3.eu-central-003.backblazeb2.com/"


def make_bridge(fake, diagnostics, records=None, platform_class=BackblazeB2Platform):
    factory = RecordingClientFactory(fake)
    platform = platform_class(client_factory=factory, diagnostics=diagnostics)
    bridge = ExportBridge(platform, records=records or InMemoryExportRecordStore())
    return bridge, factory


def local_file(tmp_path, name="photo.jpg", ref_id="7"):
    path = tmp_path / name
    path.write_bytes(b"image-bytes")
    return LocalFileRef(ref_id=ref_id, path=str(path))


class TestExportFile:
    """Test the export of local files."""

    def test_export_success(self, tmp_path, diagnostics):
        fake = FakeStorageClient(head_status_code=200)
        bridge, _ = make_bridge(fake, diagnostics)

        result = bridge.export_file(
            local_file(tmp_path),
            B2_BASE + "photos/",
            ExportCredentials(fields=B2_VALUES),
        )

        assert result.success
        assert result.key == "photos/photo.jpg"
        assert result.url == B2_BASE + "photos/photo.jpg"
        assert fake.uploaded["photos/photo.jpg"] == b"image-bytes"
        assert ("head", B2_BASE + "photos/photo.jpg") in fake.calls
        assert bridge.records.get("7", "object_key") == "photos/photo.jpg"

    def test_credentials_directory_overrides_target(self, tmp_path, diagnostics):
        fake = FakeStorageClient()
        bridge, _ = make_bridge(fake, diagnostics)
        credentials = ExportCredentials(fields=B2_VALUES, directory=B2_BASE + "uploads/")

        result = bridge.export_file(local_file(tmp_path), B2_BASE, credentials)

        assert result.key == "uploads/photo.jpg"

    def test_not_this_platform(self, tmp_path, diagnostics):
        """A foreign target path fails before any client is built."""
        fake = FakeStorageClient()
        bridge, factory = make_bridge(fake, diagnostics)

        result = bridge.export_file(
            local_file(tmp_path),
            "aws-s3://media/photos/",
            ExportCredentials(fields=B2_VALUES),
        )

        assert not result
        assert result.reason == FailureReason.NOT_THIS_PLATFORM
        assert factory.configs == []
        assert fake.calls == []
        assert diagnostics.messages() == ["Given path is not a Backblaze B2 URL."]

    def test_not_public(self, tmp_path, diagnostics):
        """An upload failing the public check is kept but not recorded."""
        fake = FakeStorageClient(head_status_code=403)
        bridge, _ = make_bridge(fake, diagnostics)

        result = bridge.export_file(
            local_file(tmp_path), B2_BASE, ExportCredentials(fields=B2_VALUES)
        )

        assert not result
        assert result.reason == FailureReason.NOT_PUBLIC
        assert "photo.jpg" in fake.uploaded
        assert bridge.records.get("7", "object_key") is None
        assert not any(call[0] == "delete" for call in fake.calls)

    def test_cloudflare_exports_rejected(self, tmp_path, diagnostics):
        fake = FakeStorageClient(head_status_code=200)
        bridge, _ = make_bridge(fake, diagnostics, platform_class=CloudflareR2Platform)
        values = {"access_key": "k", "secret": "s", "bucket": "media", "account_id": "abc"}

        result = bridge.export_file(
            local_file(tmp_path),
            "cloudflare-r2://abc/media/",
            ExportCredentials(fields=values),
        )

        assert result.reason == FailureReason.NOT_PUBLIC
        assert "photo.jpg" in fake.uploaded

    def test_local_file_missing(self, tmp_path, diagnostics):
        fake = FakeStorageClient()
        bridge, _ = make_bridge(fake, diagnostics)
        missing = LocalFileRef(ref_id="7", path=str(tmp_path / "missing.jpg"))

        result = bridge.export_file(missing, B2_BASE, ExportCredentials(fields=B2_VALUES))

        assert result.reason == FailureReason.LOCAL_FILE_MISSING
        assert fake.calls == []

    def test_missing_credentials(self, tmp_path, diagnostics):
        fake = FakeStorageClient()
        bridge, _ = make_bridge(fake, diagnostics)
        values = {"bucket": "media", "region": "eu-central-003"}

        result = bridge.export_file(
            local_file(tmp_path), B2_BASE, ExportCredentials(fields=values)
        )

        assert result.reason == FailureReason.CREDENTIALS_MISSING
        assert fake.calls == []

    def test_upload_failure(self, tmp_path, diagnostics):
        fake = FakeStorageClient(error=TransportFailureError("denied", status_code=403))
        bridge, _ = make_bridge(fake, diagnostics)

        result = bridge.export_file(
            local_file(tmp_path), B2_BASE, ExportCredentials(fields=B2_VALUES)
        )

        assert result.reason == FailureReason.TRANSPORT_FAILURE
        assert diagnostics.records[0].context == B2_BASE + " (HTTP-Status 403)"


    def test_record_write_failure(self, tmp_path, diagnostics):
        """A failing record store turns the export into a failure result."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        records = JsonFileExportRecordStore(blocker / "records.json")
        fake = FakeStorageClient(head_status_code=200)
        bridge, _ = make_bridge(fake, diagnostics, records=records)

        result = bridge.export_file(
            local_file(tmp_path), B2_BASE, ExportCredentials(fields=B2_VALUES)
        )

        assert not result
        assert result.reason == FailureReason.RECORD_STORE_FAILURE
        assert "photo.jpg" in fake.uploaded
        assert "Failed to write export records" in diagnostics.messages("error")[0]


class TestDeleteExportedFile:
    """Test deleting exported files."""

    def test_delete_recorded_file(self, diagnostics):
        fake = FakeStorageClient()
        records = InMemoryExportRecordStore()
        records.set("7", "object_key", "photos/photo.jpg")
        bridge, _ = make_bridge(fake, diagnostics, records=records)

        deleted = bridge.delete_exported_file(
            B2_BASE + "photos/photo.jpg", ExportCredentials(fields=B2_VALUES), "7"
        )

        assert deleted is True
        assert fake.calls == [("delete", "media", "photos/photo.jpg")]

    def test_no_record(self, diagnostics):
        """Without a recorded key no delete call is issued."""
        fake = FakeStorageClient()
        bridge, factory = make_bridge(fake, diagnostics)

        deleted = bridge.delete_exported_file(
            B2_BASE + "photos/photo.jpg", ExportCredentials(fields=B2_VALUES), "7"
        )

        assert deleted is False
        assert fake.calls == []
        assert factory.configs == []

    def test_foreign_url(self, diagnostics):
        fake = FakeStorageClient()
        records = InMemoryExportRecordStore()
        records.set("7", "object_key", "photo.jpg")
        bridge, _ = make_bridge(fake, diagnostics, records=records)

        deleted = bridge.delete_exported_file(
            "https://example.com/photo.jpg", ExportCredentials(fields=B2_VALUES), "7"
        )

        assert deleted is False
        assert fake.calls == []

    def test_delete_failure(self, diagnostics):
        fake = FakeStorageClient(error=TransportFailureError("boom", status_code=500))
        records = InMemoryExportRecordStore()
        records.set("7", "object_key", "photo.jpg")
        bridge, _ = make_bridge(fake, diagnostics, records=records)

        deleted = bridge.delete_exported_file(
            B2_BASE + "photo.jpg", ExportCredentials(fields=B2_VALUES), "7"
        )

        assert deleted is False
        assert diagnostics.messages()[0] == "File could not be deleted! Error: boom"


    def test_unreadable_records(self, tmp_path, diagnostics):
        """A corrupt record file is reported, no delete call is issued."""
        path = tmp_path / "records.json"
        path.write_text("{not json")
        fake = FakeStorageClient()
        bridge, _ = make_bridge(
            fake, diagnostics, records=JsonFileExportRecordStore(path)
        )

        deleted = bridge.delete_exported_file(
            B2_BASE + "photo.jpg", ExportCredentials(fields=B2_VALUES), "7"
        )

        assert deleted is False
        assert fake.calls == []
        assert "Failed to read export records" in diagnostics.messages("error")[0]


class TestExportRecordStores:
    """Test the persistence of export records."""

    def test_in_memory(self):
        store = InMemoryExportRecordStore()
        assert store.get("1", "object_key") is None
        store.set("1", "object_key", "a.jpg")
        assert store.get("1", "object_key") == "a.jpg"

    def test_json_file(self, tmp_path):
        path = tmp_path / "state" / "records.json"
        store = JsonFileExportRecordStore(path)

        assert store.get("1", "object_key") is None
        store.set("1", "object_key", "a.jpg")
        store.set("2", "object_key", "b.jpg")

        assert JsonFileExportRecordStore(path).get("1", "object_key") == "a.jpg"
        assert json.loads(path.read_text()) == {
            "1": {"object_key": "a.jpg"},
            "2": {"object_key": "b.jpg"},
        }


    def test_json_file_corrupt(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text("{not json")

        with pytest.raises(ExportRecordError):
            JsonFileExportRecordStore(path).get("1", "object_key")

    def test_json_file_not_an_object(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text("[1, 2]")

        with pytest.raises(ExportRecordError):
            JsonFileExportRecordStore(path).get("1", "object_key")

    def test_json_file_leaves_no_temp_files(self, tmp_path):
        store = JsonFileExportRecordStore(tmp_path / "records.json")

        store.set("1", "object_key", "a.jpg")
        store.set("1", "object_key", "b.jpg")

        assert [p.name for p in tmp_path.iterdir()] == ["records.json"]
        assert store.get("1", "object_key") == "b.jpg"


class TestImportUrl:
    """Test resolving bucket URLs into external references."""

    def setup_method(self, method):
        self.registry = PlatformRegistry.with_defaults()
        self.importer = ImportBridge(self.registry, MimeTypeFilter(enabled=True))

    def test_import_public_url(self):
        fields = PlatformCredentials.from_values(B2_VALUES)

        reference = self.importer.import_url(B2_BASE + "photos/a.jpg", fields)

        assert reference.platform == "backblaze-b2"
        assert reference.key == "photos/a.jpg"
        assert reference.url == B2_BASE + "photos/a.jpg"
        assert reference.mime_type == "image/jpeg"

    def test_import_cloudflare_dashboard_url(self):
        fields = PlatformCredentials.from_values(
            {"bucket": "media", "account_id": "abc123"}
        )
        url = "https://dash.cloudflare.com/abc123/r2/buckets/media/objects/docs/a.pdf"

        reference = self.importer.import_url(url, fields)

        assert reference.platform == "cloudflare-r2"
        assert reference.key == "docs/a.pdf"
        assert reference.url == "https://abc123.r2.cloudflarestorage.com/media/docs/a.pdf"

    def test_unknown_url(self):
        assert self.importer.import_url("https://example.com/a.jpg") is None

    def test_disallowed_type(self):
        fields = PlatformCredentials.from_values(
            {"bucket": "media", "region": "fra1"}
        )
        url = "https://media.fra1.digitaloceanspaces.com/tool.exe"

        assert self.registry.get("digitalocean-spaces").is_url_compatible(url, fields)
        assert self.importer.import_url(url, fields) is None

    def test_registry_holds_all_platforms(self):
        assert self.registry.names() == [
            "aws-s3",
            "backblaze-b2",
            "cloudflare-r2",
            "digitalocean-spaces",
        ]
        assert isinstance(self.registry.get("digitalocean-spaces"), DigitalOceanSpacesPlatform)

    def test_foreign_bucket_url(self):
        """URLs of another bucket on a known provider are not imported."""
        fields = PlatformCredentials.from_values(
            {"bucket": "media", "region": "eu-west-1"}
        )
        url = "https://otherbucket.s3.eu-west-1.amazonaws.com/photo.jpg"

        assert self.registry.get("aws-s3").is_url_compatible(url, fields)
        assert self.importer.import_url(url, fields) is None

    def test_foreign_cloudflare_dashboard_bucket(self):
        fields = PlatformCredentials.from_values(
            {"bucket": "media", "account_id": "abc123"}
        )
        url = "https://dash.cloudflare.com/abc123/r2/buckets/other/objects/a.pdf"

        assert self.importer.import_url(url, fields) is None

    def test_directory_marker_url(self):
        fields = PlatformCredentials.from_values(
            {"bucket": "media", "region": "eu-west-1"}
        )

        reference = self.importer.import_url("aws-s3://media/docs/a.pdf", fields)

        assert reference.platform == "aws-s3"
        assert reference.key == "docs/a.pdf"
        assert reference.url == "https://media.s3.eu-west-1.amazonaws.com/docs/a.pdf"

    def test_owns_url(self):
        platform = AwsS3Platform()
        fields = PlatformCredentials.from_values(
            {"bucket": "media", "region": "eu-west-1"}
        )

        assert platform.owns_url("https://media.s3.eu-west-1.amazonaws.com/a.jpg", fields)
        assert not platform.owns_url(
            "https://otherbucket.s3.eu-west-1.amazonaws.com/a.jpg", fields
        )
        assert not platform.owns_url("https://media.s3.eu-west-1.amazonaws.com/a.jpg")
