"""Configuration management for s3-media-tools."""

from typing import Literal

from pydantic_settings import BaseSettings

DEFAULT_ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "image/avif",
    "application/pdf",
    "application/zip",
    "application/json",
    "text/plain",
    "text/csv",
    "audio/mpeg",
    "audio/ogg",
    "audio/wav",
    "audio/x-wav",
    "video/mp4",
    "video/webm",
    "video/quicktime",
]


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "s3-media-tools"
    otel_exporter_endpoint: str = "http://localhost:4317"

    # Fernet key used to decrypt stored credentials
    encryption_key: str = ""
    credentials_scope: Literal["global", "user", "manual"] = "global"
    platform_scopes: dict[str, Literal["global", "user", "manual"]] = {}

    hide_unsupported_types: bool = True
    allowed_mime_types: list[str] = DEFAULT_ALLOWED_MIME_TYPES
    public_check_timeout: float = 10.0

    model_config = {
        "env_prefix": "S3_MEDIA_TOOLS_",
        "case_sensitive": False,
    }

    def scope_for(self, platform_name: str) -> str:
        """Return the credential scope configured for a platform."""
        return self.platform_scopes.get(platform_name, self.credentials_scope)


settings = Settings()
