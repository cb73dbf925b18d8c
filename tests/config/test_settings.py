"""Tests for SettingsManager."""

import logging
import uuid
from pathlib import Path

import pytest

from davkeep.config import Paths, SettingsManager
from davkeep.config.paths import CONFIG_DIR_ENV_VAR, _default_config_dir


@pytest.fixture
def manager(tmp_path: Path) -> SettingsManager:
    """Settings manager rooted in a temporary directory."""
    return SettingsManager(config_dir=tmp_path / "davkeep")


class TestSettingsManager:
    """Tests for loading and saving settings.conf."""

    def test_first_load_writes_defaults(
        self, manager: SettingsManager
    ) -> None:
        """A missing file is created with commented defaults."""
        config = manager.load()

        text = manager.settings_file.read_text()
        assert text.startswith("# davkeep Configuration")
        for section in ("[DEFAULT]", "[webdav]", "[device]", "[restore]"):
            assert section in text
        assert config["config_version"] == "1.0.0"
        assert config["log_level"] == "INFO"
        assert config["console_log_level"] == "WARNING"
        assert config["webdav"] == {"url": "", "username": ""}
        assert config["network"]["timeout_seconds"] == 30
        assert config["restore"] == {
            "quiesce_grace_ms": 500,
            "release_timeout_seconds": 10,
        }
        assert config["directory"]["tmp"] is None
        assert config["directory"]["app_config"] == (
            (manager.config_dir / "app").resolve()
        )
        uuid.UUID(config["device"]["id"])

    def test_device_id_is_stable(self, manager: SettingsManager) -> None:
        """The generated device id sticks once written."""
        first = manager.load()["device"]["id"]
        second = manager.load()["device"]["id"]

        assert first == second

    def test_user_values_override_defaults(
        self, manager: SettingsManager, tmp_path: Path
    ) -> None:
        """Values in the file win over defaults; missing keys default."""
        manager.config_dir.mkdir(parents=True)
        manager.settings_file.write_text(
            "[DEFAULT]\nlog_level = debug\n"
            "[webdav]\nurl = https://dav.example.com/b  \nusername = bob\n"
            f"[directory]\ntmp = {tmp_path / 'scratch'}\n"
        )

        config = manager.load()

        assert config["log_level"] == "DEBUG"
        assert config["webdav"] == {
            "url": "https://dav.example.com/b",
            "username": "bob",
        }
        assert config["directory"]["tmp"] == (tmp_path / "scratch").resolve()
        assert config["network"]["timeout_seconds"] == 30

    def test_invalid_integer_falls_back(
        self, manager: SettingsManager, caplog
    ) -> None:
        """Unparseable integers use the default with a warning."""
        manager.config_dir.mkdir(parents=True)
        manager.settings_file.write_text(
            "[network]\ntimeout_seconds = soon\n"
        )

        with caplog.at_level(logging.WARNING):
            config = manager.load()

        assert config["network"]["timeout_seconds"] == 30
        assert "timeout_seconds" in caplog.text

    def test_set_webdav_persists(self, manager: SettingsManager) -> None:
        """set_webdav writes the account to disk."""
        manager.set_webdav(" https://dav.example.com/backups ", "alice")

        reloaded = SettingsManager(manager.config_dir).load()
        assert reloaded["webdav"] == {
            "url": "https://dav.example.com/backups",
            "username": "alice",
        }

    def test_save_round_trip(self, manager: SettingsManager) -> None:
        """Saved values load back unchanged."""
        config = manager.load()
        config["restore"]["quiesce_grace_ms"] = 1500
        config["device"]["name"] = "workstation"
        manager.save(config)

        reloaded = manager.load()
        assert reloaded["restore"]["quiesce_grace_ms"] == 1500
        assert reloaded["device"]["name"] == "workstation"


class TestPaths:
    """Tests for Paths helpers."""

    def test_config_dir_env_override(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """DAVKEEP_CONFIG_DIR relocates the configuration directory."""
        monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(tmp_path / "alt"))

        assert _default_config_dir() == tmp_path / "alt"

    def test_default_config_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without the override the XDG-style location is used."""
        monkeypatch.delenv(CONFIG_DIR_ENV_VAR, raising=False)

        assert _default_config_dir() == Path.home() / ".config" / "davkeep"

    def test_app_config_default(self, manager: SettingsManager) -> None:
        """The backed-up directory defaults to app/ under the config dir."""
        config = manager.load()

        assert config["directory"]["app_config"] == Paths.app_config_dir(
            manager.config_dir
        ).resolve()
