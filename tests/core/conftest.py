"""Pytest configuration and fixtures for core module tests.

This module provides shared test fixtures for all core module tests, including:
- A recording progress reporter
- An in-memory key store for the vault
- A populated configuration directory
- A zip archive whose deflated entries are damaged

Fixtures defined here are available to all tests in the core module and its
submodules without explicit imports.
"""

import io
import struct
import zipfile
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from cryptography.fernet import Fernet

from davkeep.core.vault import CredentialVault

# =============================================================================
# Async Helpers
# =============================================================================


async def async_chunk_gen(
    chunks: list[bytes],
) -> AsyncGenerator[bytes, None]:
    """Async generator yielding chunks for simulating HTTP responses.

    Args:
        chunks: List of byte chunks to yield.

    Yields:
        Individual byte chunks.

    """
    for chunk in chunks:
        yield chunk


# =============================================================================
# Mock Progress Reporter
# =============================================================================


class MockProgressReporter:
    """Records every progress event for verification in tests."""

    def __init__(self) -> None:
        """Initialize mock reporter with an empty event log."""
        self.events: list[tuple[str, float]] = []
        self._active = True

    def is_active(self) -> bool:
        """Return whether the reporter is active."""
        return self._active

    async def report(self, message: str, progress: float) -> None:
        """Record the event."""
        self.events.append((message, progress))

    @property
    def messages(self) -> list[str]:
        """Stage ids in the order they were reported."""
        return [message for message, _ in self.events]

    @property
    def values(self) -> list[float]:
        """Progress values in the order they were reported."""
        return [progress for _, progress in self.events]


class StaticKeyStore:
    """Key store returning a fixed Fernet key without touching keyring."""

    def __init__(self, key: bytes | None = None) -> None:
        """Initialize with a key, generating one when omitted."""
        self.key = key or Fernet.generate_key()

    def get_key(self) -> bytes:
        """Return the fixed key."""
        return self.key


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def progress_reporter() -> MockProgressReporter:
    """Provide a recording progress reporter."""
    return MockProgressReporter()


@pytest.fixture
def key_store() -> StaticKeyStore:
    """Provide an in-memory vault key store."""
    return StaticKeyStore()


@pytest.fixture
def vault(tmp_path: Path, key_store: StaticKeyStore) -> CredentialVault:
    """Provide a vault stored under a temporary config directory."""
    return CredentialVault(tmp_path / "vault", key_store)  # type: ignore[arg-type]


@pytest.fixture
def config_tree(tmp_path: Path) -> Path:
    """Create a configuration directory with nested files and secrets."""
    root = tmp_path / "app"
    (root / "profiles" / "work").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "settings.json").write_text('{"theme": "dark"}')
    (root / "profiles" / "work" / "hosts.txt").write_text("example.org\n")
    (root / "data.db").write_bytes(bytes(range(256)) * 4)
    (root / ".webdav_secret").write_text("should never leave")
    (root / "cache.credentials").write_text("token")
    (root / ".credentials").mkdir()
    (root / ".credentials" / "inner.txt").write_text("nested secret")
    return root


def damage_deflated_entries(raw: bytes) -> bytes:
    """Invert every compressed payload byte, keeping headers intact."""
    data = bytearray(raw)
    with zipfile.ZipFile(io.BytesIO(raw)) as archive:
        infos = archive.infolist()
    for info in infos:
        name_len, extra_len = struct.unpack_from(
            "<HH", data, info.header_offset + 26
        )
        start = info.header_offset + 30 + name_len + extra_len
        for i in range(start, start + info.compress_size):
            data[i] ^= 0xFF
    return bytes(data)


@pytest.fixture
def corrupt_archive() -> bytes:
    """Zip with a valid directory but undecodable deflated entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(
            "backup_meta.json",
            b'{"version": "1.0.0", "deviceId": "d", "deviceName": "n", '
            b'"timestamp": 1, "platform": "linux"}',
        )
        archive.writestr("settings.json", b'{"theme": "dark"}\n' * 64)
    return damage_deflated_entries(buffer.getvalue())
