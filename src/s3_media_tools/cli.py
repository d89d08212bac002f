"""Command-line interface for s3-media-tools.

This module provides a CLI for browsing and exchanging files with
S3-compatible buckets.

Commands:
    - providers: List the supported platforms and their regions
    - login: Check credentials against a platform
    - list: Show the directory tree of a bucket path
    - export: Upload a local file and print its public URL
    - delete: Delete a previously exported file
    - import: Resolve a bucket URL into an external file reference

Credentials are passed as options or through S3_MEDIA_TOOLS_* environment
variables. Export records are kept in a JSON file.
"""

import json
from typing import Annotated, Optional

import typer

from . import __version__
from .core.observability import LogDiagnostics
from .platforms import PLATFORM_CLASSES
from .schemas import ExportCredentials, LocalFileRef, PlatformCredentials
from .transfer import JsonFileExportRecordStore
from .unified import MediaStorageService, create_service

app = typer.Typer(
    name="s3-media-tools",
    help="Directory listing and media export for S3-compatible object storage.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"s3-media-tools {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    S3 Media Tools: browse, export and import files on S3-compatible storage.

    Supported platforms: aws-s3, backblaze-b2, cloudflare-r2, digitalocean-spaces.
    """
    pass


PlatformArgument = Annotated[
    str,
    typer.Argument(help="Platform name, e.g. aws-s3 or cloudflare-r2"),
]
AccessKeyOption = Annotated[
    Optional[str],
    typer.Option("--access-key", envvar="S3_MEDIA_TOOLS_ACCESS_KEY", help="Access key"),
]
SecretOption = Annotated[
    Optional[str],
    typer.Option("--secret", envvar="S3_MEDIA_TOOLS_SECRET", help="Secret key"),
]
BucketOption = Annotated[
    Optional[str],
    typer.Option("--bucket", envvar="S3_MEDIA_TOOLS_BUCKET", help="Bucket name"),
]
RegionOption = Annotated[
    Optional[str],
    typer.Option(
        "--region",
        envvar="S3_MEDIA_TOOLS_REGION",
        help="Region (AWS S3, Backblaze B2, DigitalOcean Spaces)",
    ),
]
AccountIdOption = Annotated[
    Optional[str],
    typer.Option(
        "--account-id",
        envvar="S3_MEDIA_TOOLS_ACCOUNT_ID",
        help="Account ID (Cloudflare R2)",
    ),
]
EuOption = Annotated[
    bool,
    typer.Option("--eu", help="Use the EU jurisdiction (Cloudflare R2)"),
]
RecordsOption = Annotated[
    str,
    typer.Option(
        "--records",
        envvar="S3_MEDIA_TOOLS_RECORDS",
        help="JSON file holding the export records",
    ),
]

DEFAULT_RECORDS_FILE = ".s3-media-tools-records.json"


def _credential_values(
    access_key: Optional[str],
    secret: Optional[str],
    bucket: Optional[str],
    region: Optional[str],
    account_id: Optional[str],
    eu: bool,
) -> dict[str, str]:
    """Collect the given credential options into field values."""
    values = {
        "access_key": access_key,
        "secret": secret,
        "bucket": bucket,
        "region": region,
        "account_id": account_id,
        "eu": "1" if eu else None,
    }
    return {name: value for name, value in values.items() if value}


def _service(diagnostics: LogDiagnostics, records: Optional[str] = None) -> MediaStorageService:
    return create_service(
        records=JsonFileExportRecordStore(records) if records else None,
        diagnostics=diagnostics,
    )


def _fail(diagnostics: LogDiagnostics, fallback: str) -> None:
    """Print the recorded error diagnostics and exit with status 1."""
    messages = diagnostics.messages("error") or [fallback]
    for message in messages:
        typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.command("providers")
def providers_cmd() -> None:
    """List the supported platforms, their labels and known regions."""
    for platform_class in PLATFORM_CLASSES:
        descriptor = platform_class.descriptor
        typer.echo(f"{descriptor.name}: {descriptor.label}")
        if platform_class.regions:
            typer.echo(f"  Regions: {', '.join(platform_class.regions)}")
        fields = ", ".join(spec.name for spec in platform_class.field_specs)
        typer.echo(f"  Fields: {fields}")


@app.command("login")
def login_cmd(
    platform: PlatformArgument,
    access_key: AccessKeyOption = None,
    secret: SecretOption = None,
    bucket: BucketOption = None,
    region: RegionOption = None,
    account_id: AccountIdOption = None,
    eu: EuOption = False,
) -> None:
    """
    Check the credentials with a single listing call.

    Example:
        s3-media-tools login aws-s3 --bucket media --region eu-west-1
    """
    diagnostics = LogDiagnostics()
    fields = PlatformCredentials.from_values(
        _credential_values(access_key, secret, bucket, region, account_id, eu)
    )
    if not _service(diagnostics).login(platform, fields):
        _fail(diagnostics, "Login failed.")
    typer.echo(f"Login to {platform} successful.")


def _echo_tree(node, indent: int = 0) -> None:
    typer.echo(f"{'  ' * indent}{node.title}/")
    for entry in node.files:
        typer.echo(f"{'  ' * (indent + 1)}{entry.title} ({entry.size:,} bytes)")
    for child in node.dirs.values():
        _echo_tree(child, indent + 1)


@app.command("list")
def list_cmd(
    platform: PlatformArgument,
    path: Annotated[
        str,
        typer.Argument(help="Directory marker URL to list, the bucket root if empty"),
    ] = "",
    access_key: AccessKeyOption = None,
    secret: SecretOption = None,
    bucket: BucketOption = None,
    region: RegionOption = None,
    account_id: AccountIdOption = None,
    eu: EuOption = False,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the tree as JSON")
    ] = False,
) -> None:
    """
    List the directory tree of a bucket path.

    Examples:
        s3-media-tools list aws-s3 aws-s3://media/photos/ --region eu-west-1
        s3-media-tools list cloudflare-r2 --account-id abc123 --bucket media
    """
    diagnostics = LogDiagnostics()
    fields = PlatformCredentials.from_values(
        _credential_values(access_key, secret, bucket, region, account_id, eu)
    )
    result = _service(diagnostics).list_directory(platform, path, fields)
    if not result:
        _fail(diagnostics, "Listing failed.")

    assert result.tree is not None

    if path and not result.found:
        typer.echo(f"Directory '{path}' not found, showing the whole bucket.", err=True)

    if as_json:
        typer.echo(json.dumps(result.tree.to_dict(), indent=2))
    else:
        _echo_tree(result.tree)


@app.command("export")
def export_cmd(
    platform: PlatformArgument,
    local_path: Annotated[str, typer.Argument(help="Local file to upload")],
    target: Annotated[
        str, typer.Argument(help="Directory marker URL to upload into")
    ],
    ref_id: Annotated[
        Optional[str],
        typer.Option("--ref", help="Reference to record the export under"),
    ] = None,
    access_key: AccessKeyOption = None,
    secret: SecretOption = None,
    bucket: BucketOption = None,
    region: RegionOption = None,
    account_id: AccountIdOption = None,
    eu: EuOption = False,
    records: RecordsOption = DEFAULT_RECORDS_FILE,
) -> None:
    """
    Upload a local file and print its public URL.

    Example:
        s3-media-tools export aws-s3 ./photo.jpg aws-s3://media/photos/ \
            --bucket media --region eu-west-1 --ref 42
    """
    diagnostics = LogDiagnostics()
    credentials = ExportCredentials(
        fields=_credential_values(access_key, secret, bucket, region, account_id, eu),
        directory=target,
    )
    file = LocalFileRef(ref_id=ref_id or local_path, path=local_path)
    result = _service(diagnostics, records).export_file(
        platform, file, target, credentials
    )
    if not result:
        _fail(diagnostics, "Export failed.")
    typer.echo(result.url)


@app.command("delete")
def delete_cmd(
    platform: PlatformArgument,
    url: Annotated[str, typer.Argument(help="Public URL of the exported file")],
    ref_id: Annotated[
        str, typer.Option("--ref", help="Reference the export was recorded under")
    ],
    access_key: AccessKeyOption = None,
    secret: SecretOption = None,
    bucket: BucketOption = None,
    region: RegionOption = None,
    account_id: AccountIdOption = None,
    eu: EuOption = False,
    records: RecordsOption = DEFAULT_RECORDS_FILE,
) -> None:
    """
    Delete a previously exported file from its bucket.

    Example:
        s3-media-tools delete aws-s3 \
            https://media.s3.eu-west-1.amazonaws.com/photos/photo.jpg --ref 42
    """
    diagnostics = LogDiagnostics()
    credentials = ExportCredentials(
        fields=_credential_values(access_key, secret, bucket, region, account_id, eu)
    )
    if not _service(diagnostics, records).delete_exported_file(
        platform, url, credentials, ref_id
    ):
        _fail(diagnostics, f"No exported file recorded for '{ref_id}'.")
    typer.echo("Deleted.")


@app.command("import")
def import_cmd(
    url: Annotated[str, typer.Argument(help="Bucket or dashboard URL of an object")],
    access_key: AccessKeyOption = None,
    secret: SecretOption = None,
    bucket: BucketOption = None,
    region: RegionOption = None,
    account_id: AccountIdOption = None,
    eu: EuOption = False,
) -> None:
    """
    Resolve a bucket URL into an external file reference.

    Example:
        s3-media-tools import https://media.s3.eu-west-1.amazonaws.com/a.jpg \
            --bucket media --region eu-west-1
    """
    diagnostics = LogDiagnostics()
    fields = PlatformCredentials.from_values(
        _credential_values(access_key, secret, bucket, region, account_id, eu)
    )
    reference = _service(diagnostics).import_url(url, fields)
    if reference is None:
        typer.echo(f"Error: '{url}' is not an importable file.", err=True)
        raise typer.Exit(1)

    typer.echo(f"Platform: {reference.platform}")
    typer.echo(f"Key: {reference.key}")
    typer.echo(f"URL: {reference.url}")
    typer.echo(f"Mime type: {reference.mime_type}")
