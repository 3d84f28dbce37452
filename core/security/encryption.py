"""
Token encryption service using Fernet symmetric encryption.

Provides secure storage for sensitive data like GitHub access tokens and,
when configured, an extra encryption layer around session cookies.
"""

from cryptography.fernet import Fernet, InvalidToken

from core.logging import get_logger

logger = get_logger("security.encryption")


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""

    pass


class TokenEncryption:
    """
    Fernet-based encryption for sensitive tokens.

    Fernet guarantees that data encrypted using it cannot be read
    or tampered with without the key. It uses AES-128-CBC with
    HMAC for authentication.

    Usage:
        encryption = TokenEncryption(key)

        encrypted = encryption.encrypt("gho_xxxx...")
        decrypted = encryption.decrypt(encrypted)

    An instance built without a key is unavailable: ``encrypt_if_available``
    then stores plaintext and ``decrypt_if_encrypted`` is a no-op.
    """

    def __init__(self, key: str | None = None):
        self._fernet: Fernet | None = None
        if not key:
            return
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            logger.error("encryption_init_failed", error_type=type(e).__name__)
            raise EncryptionError("Invalid Fernet key") from e

    @property
    def is_available(self) -> bool:
        """Check if encryption is available."""
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a string value.

        Raises:
            EncryptionError: If encryption is unavailable
        """
        if self._fernet is None:
            raise EncryptionError("Encryption is not available")
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt an encrypted string.

        Raises:
            EncryptionError: If decryption fails or is unavailable
        """
        if self._fernet is None:
            raise EncryptionError("Encryption is not available")

        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as e:
            raise EncryptionError("Invalid token - decryption failed") from e

    def encrypt_if_available(self, plaintext: str) -> tuple[str, bool]:
        """
        Encrypt if available, otherwise return the original.

        Returns:
            Tuple of (result_string, was_encrypted)
        """
        if not self.is_available:
            return plaintext, False
        return self.encrypt(plaintext), True

    def decrypt_if_encrypted(self, value: str) -> str:
        """
        Decrypt if the value appears to be encrypted.

        Fernet tokens start with 'gAAAAA' (base64 of version byte + timestamp).
        """
        if not self.is_available or not value.startswith("gAAAAA"):
            return value

        try:
            return self.decrypt(value)
        except EncryptionError:
            logger.warning("decrypt_failed_returning_raw")
            return value


__all__ = ["EncryptionError", "TokenEncryption"]
