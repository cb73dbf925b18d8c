"""Tests for domain types."""

from pathlib import Path

import pytest

from davkeep.domain.types import (
    BackupMetadata,
    CloudBackupFile,
    PipelineState,
    RestorePreview,
    current_platform,
)


class TestBackupMetadata:
    """Tests for BackupMetadata."""

    def test_create_fills_version_and_platform(self) -> None:
        """create() stamps the archive format and OS."""
        metadata = BackupMetadata.create("id-1", "laptop", 1234)

        assert metadata.version == "1.0.0"
        assert metadata.timestamp == 1234
        assert metadata.platform == current_platform()
        assert metadata.platform in ("linux", "macos", "windows")

    def test_create_uses_current_time(self) -> None:
        """Without an override the timestamp is now in milliseconds."""
        metadata = BackupMetadata.create("id-1", "laptop")

        assert metadata.timestamp > 1_600_000_000_000

    def test_camel_case_round_trip(self) -> None:
        """to_dict/from_dict use the camelCase wire names."""
        metadata = BackupMetadata("1.0.0", "id", "name", 5, "linux")
        data = metadata.to_dict()

        assert data == {
            "version": "1.0.0",
            "deviceId": "id",
            "deviceName": "name",
            "timestamp": 5,
            "platform": "linux",
        }
        assert BackupMetadata.from_dict(data) == metadata

    @pytest.mark.parametrize(
        "data",
        [
            {"version": "1.0.0"},
            {
                "version": "1.0.0",
                "deviceId": "i",
                "deviceName": "n",
                "timestamp": "yesterday",
                "platform": "linux",
            },
            ["not", "a", "dict"],
        ],
    )
    def test_from_dict_rejects_invalid(self, data) -> None:
        """Missing or mistyped fields raise ValueError."""
        with pytest.raises(ValueError):
            BackupMetadata.from_dict(data)

    @pytest.mark.parametrize(
        ("version", "supported"),
        [("1.0.0", True), ("1.4.2", True), ("2.0.0", False), ("x", False)],
    )
    def test_is_supported_format(self, version: str, supported: bool) -> None:
        """Same major format versions are readable."""
        metadata = BackupMetadata(version, "i", "n", 0, "linux")

        assert metadata.is_supported_format() is supported


class TestValueTypes:
    """Tests for listing and preview records."""

    def test_cloud_backup_file_to_dict(self) -> None:
        """Listing entries serialize their three fields."""
        entry = CloudBackupFile("backup_a.zip", "Unknown", "0.00 MB")

        assert entry.to_dict() == {
            "name": "backup_a.zip",
            "date": "Unknown",
            "size": "0.00 MB",
        }

    def test_restore_preview_to_dict(self) -> None:
        """Previews serialize as tempFilePath and metadata."""
        preview = RestorePreview(Path("/tmp/restore_temp_1.zip"))

        assert preview.to_dict() == {
            "tempFilePath": "/tmp/restore_temp_1.zip",
            "metadata": None,
        }

    def test_terminal_states(self) -> None:
        """Only Complete and Failed are terminal."""
        terminal = {state for state in PipelineState if state.is_terminal}

        assert terminal == {PipelineState.COMPLETE, PipelineState.FAILED}
