"""Storage for the vault encryption key.

The Fernet key lives in the system keyring (SecretService on Linux,
Keychain on macOS, Credential Manager on Windows). Headless machines
without a keyring backend keep it in an owner-only key file next to the
vault instead.
"""

import os
from pathlib import Path

import keyring
from cryptography.fernet import Fernet

from davkeep.constants import (
    SECRET_FILE_MODE,
    VAULT_KEYRING_SERVICE,
    VAULT_KEYRING_USERNAME,
)
from davkeep.exceptions import FileSystemError
from davkeep.logger import get_logger

logger = get_logger(__name__)


def write_secret_file(path: Path, data: bytes) -> None:
    """Write data to path readable by the owner only.

    Raises:
        FileSystemError: If the file cannot be written

    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(
            path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SECRET_FILE_MODE
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        path.chmod(SECRET_FILE_MODE)
    except OSError as e:
        raise FileSystemError(str(e), target=str(path)) from e


class VaultKeyStore:
    """Provides the Fernet key used by the credential vault.

    An existing key file always wins so a key created while the keyring
    was unavailable is not orphaned later.
    """

    def __init__(
        self,
        key_file: Path,
        *,
        use_keyring: bool = True,
        service: str = VAULT_KEYRING_SERVICE,
        username: str = VAULT_KEYRING_USERNAME,
    ) -> None:
        """Initialize the key store.

        Args:
            key_file: Fallback key file location
            use_keyring: Try the system keyring before the key file
            service: Keyring service name
            username: Keyring username

        """
        self.key_file = key_file
        self.use_keyring = use_keyring
        self.service = service
        self.username = username

    def get_key(self) -> bytes:
        """Return the vault key, creating it on first use.

        Raises:
            FileSystemError: If the fallback key file cannot be used

        """
        if self.key_file.exists():
            return self._read_key_file()

        if self.use_keyring:
            key = self._keyring_key()
            if key is not None:
                return key

        key = Fernet.generate_key()
        write_secret_file(self.key_file, key)
        logger.debug("Created vault key file %s", self.key_file)
        return key

    def _read_key_file(self) -> bytes:
        try:
            return self.key_file.read_bytes().strip()
        except OSError as e:
            raise FileSystemError(str(e), target=str(self.key_file)) from e

    def _keyring_key(self) -> bytes | None:
        """Fetch or create the key in the keyring, None if unavailable."""
        try:
            stored = keyring.get_password(self.service, self.username)
            if stored:
                logger.debug("Vault key retrieved from keyring")
                return stored.encode("ascii")

            key = Fernet.generate_key()
            keyring.set_password(
                self.service, self.username, key.decode("ascii")
            )
        except Exception as e:  # noqa: BLE001
            # Keyring unavailable is expected in headless environments
            logger.debug("Keyring unavailable, using key file: %s", e)
            return None

        logger.debug("Vault key stored in keyring")
        return key
