"""Credential and transfer schemas for s3-media-tools."""

from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

CredentialScope = Literal["global", "user", "manual"]


class CredentialField(BaseModel):
    """One named credential field and whether the host may edit it."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(default="", description="Plain-text field value")
    is_readonly: bool = Field(
        default=False, description="True if the value comes from stored settings"
    )


class PlatformCredentials(BaseModel):
    """Named credential fields of one platform.

    Field names are provider specific; every platform uses ``access_key``,
    ``secret`` and ``bucket``.
    """

    fields: dict[str, CredentialField] = Field(default_factory=dict)

    @classmethod
    def from_values(
        cls, values: Mapping[str, Any], readonly: bool = False
    ) -> "PlatformCredentials":
        """Build credentials from a plain ``name -> value`` mapping."""
        return cls(
            fields={
                name: CredentialField(
                    value="" if value is None else str(value),
                    is_readonly=readonly and bool(value),
                )
                for name, value in values.items()
            }
        )

    def value(self, name: str, default: str = "") -> str:
        """Return the value of a field or ``default`` if it is not set."""
        field = self.fields.get(name)
        if field is None or not field.value:
            return default
        return field.value

    def flag(self, name: str) -> bool:
        """Return a field interpreted as a boolean flag."""
        return self.value(name).strip().lower() in ("1", "true", "yes", "on")

    def has(self, *names: str) -> bool:
        """Return True if all named fields carry a non-empty value."""
        return all(self.value(name) for name in names)

    def values(self) -> dict[str, str]:
        return {name: field.value for name, field in self.fields.items()}

    def __bool__(self) -> bool:
        return bool(self.fields)


class ExportCredentials(BaseModel):
    """Credentials and target directory passed along with an export."""

    fields: dict[str, str] = Field(
        default_factory=dict, description="Credential field values by name"
    )
    directory: Optional[str] = Field(
        default=None, description="Target directory marker URL for the upload"
    )

    def to_platform_credentials(self) -> PlatformCredentials:
        return PlatformCredentials.from_values(self.fields)


class LocalFileRef(BaseModel):
    """A locally held file and the host's reference to it."""

    ref_id: str = Field(..., description="Host reference, e.g. an attachment id")
    path: str = Field(..., description="Local filesystem path of the file")
