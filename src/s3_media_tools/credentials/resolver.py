"""Credential resolution for global, per-user and manual scopes.

Global scope reads platform-wide options, decrypting secret fields only.
User scope reads the metadata of one user and decrypts every field. Manual
scope stores nothing; the caller enters all values.

Values are read from the store on every call and never cached.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from s3_media_tools.core import get_logger, settings
from s3_media_tools.schemas import CredentialField, CredentialScope, PlatformCredentials

from .secrets import SecretStore
from .store import InMemorySettingsStore, SettingsStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of one credential field of a platform."""

    name: str
    label: str
    secret: bool = False
    default: str = ""


def storage_name(platform_name: str, field_name: str) -> str:
    """Return the option / user-meta name a field is stored under."""
    return f"{platform_name}_{field_name}".replace("-", "_")


class CredentialResolver:
    """Resolves the credential fields of a platform from stored settings."""

    def __init__(self, store: SettingsStore, secrets: SecretStore):
        self.store = store
        self.secrets = secrets

    def resolve(
        self,
        platform_name: str,
        specs: Sequence[FieldSpec],
        scope: Optional[CredentialScope] = None,
        user_id: Optional[str] = None,
    ) -> PlatformCredentials:
        """Return the credential fields of a platform.

        Args:
            platform_name: Name of the platform
            specs: Field declarations of the platform
            scope: "global", "user" or "manual"; configured scope if omitted
            user_id: User whose fields are read in user scope

        Returns:
            The resolved fields; empty if the user of a user scope is unknown

        Raises:
            SecretDecryptionError: If a stored secret cannot be decrypted
        """
        scope = scope or settings.scope_for(platform_name)

        if scope == "manual":
            return PlatformCredentials(
                fields={spec.name: CredentialField(value=spec.default) for spec in specs}
            )

        if scope == "user":
            if user_id is None or not self.store.user_exists(user_id):
                logger.info(
                    "User for credentials not available",
                    platform=platform_name,
                    user_id=user_id,
                )
                return PlatformCredentials()
            fields = {
                spec.name: self._field(
                    self.secrets.decrypt(
                        self.store.get_user_meta(
                            user_id, storage_name(platform_name, spec.name)
                        )
                    )
                )
                for spec in specs
            }
        else:
            fields = {}
            for spec in specs:
                raw = self.store.get_option(
                    storage_name(platform_name, spec.name), spec.default
                )
                value = self.secrets.decrypt(raw) if spec.secret else raw
                fields[spec.name] = self._field(value)

        logger.debug(
            "Credentials resolved",
            platform=platform_name,
            scope=scope,
            fields=sorted(name for name, f in fields.items() if f.value),
        )
        return PlatformCredentials(fields=fields)

    @staticmethod
    def _field(value: str) -> CredentialField:
        return CredentialField(value=value, is_readonly=bool(value))

    def save(
        self,
        platform_name: str,
        specs: Sequence[FieldSpec],
        values: Mapping[str, str],
        scope: CredentialScope = "global",
        user_id: Optional[str] = None,
    ) -> None:
        """Store credential values, encrypting them like ``resolve`` expects.

        Only ``InMemorySettingsStore`` supports writing; hosts persist
        settings through their own configuration screens.
        """
        if not isinstance(self.store, InMemorySettingsStore):
            raise TypeError("Settings store does not support writing")
        if scope == "manual":
            return

        for spec in specs:
            if spec.name not in values:
                continue
            name = storage_name(platform_name, spec.name)
            if scope == "user":
                if user_id is None:
                    raise ValueError("user_id is required for user scope")
                self.store.set_user_meta(
                    user_id, name, self.secrets.encrypt(values[spec.name])
                )
            else:
                value = values[spec.name]
                self.store.set_option(
                    name, self.secrets.encrypt(value) if spec.secret else value
                )
