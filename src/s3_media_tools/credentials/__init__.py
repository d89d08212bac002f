"""Credential storage and resolution for platform connections."""

from .resolver import CredentialResolver, FieldSpec
from .secrets import FernetSecretStore, SecretStore
from .store import InMemorySettingsStore, SettingsStore

__all__ = [
    "CredentialResolver",
    "FernetSecretStore",
    "FieldSpec",
    "InMemorySettingsStore",
    "SecretStore",
    "SettingsStore",
]
