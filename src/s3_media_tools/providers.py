"""Static metadata of the supported S3-compatible storage vendors."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProviderDescriptor:
    """Label and public-URL template of one storage vendor.

    The template uses ``str.format`` placeholders; ``{key}`` is always the
    object key, the other placeholders are filled from credential fields.
    """

    name: str
    label: str
    public_url_template: str
    host_hint: str

    def public_url(self, key: str = "", **values: str) -> str:
        """Render the public URL of ``key``; an empty key yields the base URL."""
        return self.public_url_template.format(key=key, **values)


AWS_S3 = ProviderDescriptor(
    name="aws-s3",
    label="AWS S3",
    public_url_template="https://{bucket}.s3.{region}.amazonaws.com/{key}",
    host_hint="amazonaws.com",
)

BACKBLAZE_B2 = ProviderDescriptor(
    name="backblaze-b2",
    label="Backblaze B2",
    public_url_template="https://{bucket}.s3.{region}.backblazeb2.com/{key}",
    host_hint="backblazeb2.com",
)

CLOUDFLARE_R2 = ProviderDescriptor(
    name="cloudflare-r2",
    label="Cloudflare R2",
    public_url_template=(
        "https://{account_id}{jurisdiction}.r2.cloudflarestorage.com/{bucket}/{key}"
    ),
    host_hint="r2.cloudflarestorage.com",
)

DIGITALOCEAN_SPACES = ProviderDescriptor(
    name="digitalocean-spaces",
    label="DigitalOcean Spaces",
    public_url_template="https://{bucket}.{region}.digitaloceanspaces.com/{key}",
    host_hint="digitaloceanspaces.com",
)

PROVIDERS: dict[str, ProviderDescriptor] = {
    provider.name: provider
    for provider in (AWS_S3, BACKBLAZE_B2, CLOUDFLARE_R2, DIGITALOCEAN_SPACES)
}


def get_provider(name: str) -> Optional[ProviderDescriptor]:
    """Return the descriptor registered under ``name``."""
    return PROVIDERS.get(name)
