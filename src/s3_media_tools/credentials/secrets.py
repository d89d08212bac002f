"""Symmetric encryption of stored credential values."""

from typing import Optional, Protocol, Union

from cryptography.fernet import Fernet, InvalidToken

from s3_media_tools.core import get_logger, settings
from s3_media_tools.core.exceptions import SecretDecryptionError, ValidationError

logger = get_logger(__name__)


class SecretStore(Protocol):
    """Protocol for encrypting and decrypting stored secrets."""

    def encrypt(self, plaintext: str) -> str:
        ...

    def decrypt(self, ciphertext: str) -> str:
        ...


class FernetSecretStore:
    """Secret store using Fernet (AES-128-CBC with HMAC-SHA256).

    Empty values stay empty in both directions so unset fields need no key
    material to round-trip.
    """

    def __init__(self, key: Optional[Union[str, bytes]] = None):
        key = key or settings.encryption_key
        if not key:
            raise ValidationError(
                "No encryption key configured, set S3_MEDIA_TOOLS_ENCRYPTION_KEY"
            )
        try:
            self._fernet = Fernet(key)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Invalid encryption key - must be a Fernet key: {e}")

    @staticmethod
    def generate_key() -> str:
        return Fernet.generate_key().decode()

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            return ""
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        if not ciphertext:
            return ""
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken:
            logger.warning("Stored secret could not be decrypted")
            raise SecretDecryptionError("Stored secret could not be decrypted")
