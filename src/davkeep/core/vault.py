"""Local credential vault for the WebDAV password.

The password is wrapped in sentinel markers and encrypted with Fernet
(AES with an HMAC), so a modified or foreign blob is detected instead of
yielding a garbage password. Blobs written by older releases, plain
base64 of the wrapped password, are still readable and get re-saved in
the encrypted format on first load.
"""

import base64
import binascii
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken

from davkeep.constants import (
    VAULT_FILENAME,
    VAULT_SENTINEL_PREFIX,
    VAULT_SENTINEL_SUFFIX,
)
from davkeep.core.keystore import VaultKeyStore, write_secret_file
from davkeep.exceptions import (
    FileSystemError,
    VaultCorruptedError,
    VaultNotStoredError,
)
from davkeep.logger import get_logger

logger = get_logger(__name__)


def _wrap(password: str) -> bytes:
    return f"{VAULT_SENTINEL_PREFIX}{password}{VAULT_SENTINEL_SUFFIX}".encode()


def _unwrap(data: bytes) -> str | None:
    """Strip the sentinels, None if they are missing."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if (
        len(text) < len(VAULT_SENTINEL_PREFIX) + len(VAULT_SENTINEL_SUFFIX)
        or not text.startswith(VAULT_SENTINEL_PREFIX)
        or not text.endswith(VAULT_SENTINEL_SUFFIX)
    ):
        return None
    return text[len(VAULT_SENTINEL_PREFIX) : -len(VAULT_SENTINEL_SUFFIX)]


class CredentialVault:
    """Stores the WebDAV password in ``<config_dir>/.webdav_secret``."""

    def __init__(self, config_dir: Path, key_store: VaultKeyStore) -> None:
        """Initialize vault.

        Args:
            config_dir: Directory holding the vault file
            key_store: Provider of the encryption key

        """
        self.config_dir = config_dir
        self.key_store = key_store
        self.vault_file = config_dir / VAULT_FILENAME

    def is_stored(self) -> bool:
        """Check whether a password blob exists."""
        return self.vault_file.is_file()

    def save(self, password: str) -> None:
        """Encrypt and persist password, replacing any previous one.

        Raises:
            FileSystemError: If the vault cannot be written

        """
        token = Fernet(self.key_store.get_key()).encrypt(_wrap(password))
        write_secret_file(self.vault_file, token)
        logger.debug("Password saved to vault (value hidden)")

    def load(self) -> str:
        """Return the stored password.

        Raises:
            VaultNotStoredError: If no password was saved
            VaultCorruptedError: If the blob cannot be decoded
            FileSystemError: If the vault cannot be read

        """
        if not self.vault_file.exists():
            msg = "save the WebDAV password first"
            raise VaultNotStoredError(msg, target=str(self.vault_file))

        try:
            blob = self.vault_file.read_bytes().strip()
        except OSError as e:
            raise FileSystemError(str(e), target=str(self.vault_file)) from e

        try:
            decrypted = Fernet(self.key_store.get_key()).decrypt(blob)
        except InvalidToken:
            password = self._load_legacy(blob)
            logger.info("Upgrading stored password to encrypted format")
            self.save(password)
            return password

        password = _unwrap(decrypted)
        if password is None:
            msg = "decrypted data is missing its delimiters"
            raise VaultCorruptedError(msg, target=str(self.vault_file))
        return password

    def _load_legacy(self, blob: bytes) -> str:
        """Decode a base64 blob written by older releases."""
        try:
            decoded = base64.b64decode(blob, validate=True)
        except (binascii.Error, ValueError) as e:
            msg = "stored data is neither encrypted nor legacy encoded"
            raise VaultCorruptedError(msg, target=str(self.vault_file)) from e

        password = _unwrap(decoded)
        if password is None:
            msg = "stored data is neither encrypted nor legacy encoded"
            raise VaultCorruptedError(msg, target=str(self.vault_file))
        return password

    def clear(self) -> None:
        """Remove the stored password if present."""
        try:
            self.vault_file.unlink(missing_ok=True)
        except OSError as e:
            raise FileSystemError(str(e), target=str(self.vault_file)) from e
        logger.debug("Vault cleared")
