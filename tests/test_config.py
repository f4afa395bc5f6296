"""Tests for configuration loading and saving."""

import json
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from dvsavesync.config import (
    DEFAULT_LAST_UPDATED,
    DEFAULT_SAVE_LOCATION,
    BackupPreference,
    SyncConfiguration,
    create_default_configuration,
    get_config_path,
    load_configuration,
    parse_timestamp,
    save_configuration,
)
from dvsavesync.exceptions import ConfigError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestSyncConfiguration:
    """Tests for SyncConfiguration serialization."""

    def test_to_dict_uses_file_keys(self):
        """Serialized keys match the configuration file format."""
        config = SyncConfiguration(
            save_location="/game/SaveGameData",
            upload_location="/backup",
            backup_option=BackupPreference.ALWAYS_BACKUP,
            last_updated=datetime(2024, 1, 2, 3, 4, 5),
            include_backup_save_files=False,
            allow_download=False,
            keep_alive=True,
        )

        assert config.to_dict() == {
            "SaveLocation": "/game/SaveGameData",
            "UploadLocation": "/backup",
            "BackupOption": 3,
            "LastUpdated": "2024-01-02T03:04:05",
            "IncludeBackupSaveFiles": False,
            "AllowDownloadSavegame": False,
            "KeepAlive": True,
        }

    def test_from_dict_defaults(self):
        """Missing keys fall back to defaults."""
        config = SyncConfiguration.from_dict({"SaveLocation": "/game"})

        assert config.save_location == "/game"
        assert config.upload_location == ""
        assert config.backup_option == BackupPreference.ONLY_IN_DANGER
        assert config.last_updated == DEFAULT_LAST_UPDATED
        assert config.allow_download is True

    def test_from_dict_invalid_backup_option(self):
        """Unknown backup options are rejected."""
        with pytest.raises(ValueError):
            SyncConfiguration.from_dict({"BackupOption": 9})

    def test_int_backup_option_is_converted(self):
        """Plain integers become BackupPreference members."""
        config = SyncConfiguration(backup_option=1)

        assert config.backup_option is BackupPreference.ASK_FOR_BACKUP


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_plain_iso(self):
        assert parse_timestamp("2020-05-31T21:17:34") == datetime(
            2020, 5, 31, 21, 17, 34
        )

    def test_seven_fraction_digits(self):
        """Fractions longer than microseconds are truncated."""
        assert parse_timestamp("2023-10-19T17:56:12.1234567") == datetime(
            2023, 10, 19, 17, 56, 12, 123456
        )

    def test_short_fraction(self):
        assert parse_timestamp("2023-10-19T17:56:12.5").microsecond == 500000

    def test_utc_suffix(self):
        """A trailing Z is read as UTC."""
        parsed = parse_timestamp("2023-10-19T17:56:12.1234567Z")

        assert parsed.tzinfo == timezone.utc
        assert parsed.microsecond == 123456

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestLoadConfiguration:
    """Tests for load_configuration."""

    def test_load_existing_file(self, temp_dir):
        """Files written by earlier releases load, extra keys are ignored."""
        config_file = temp_dir / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "SaveLocation": "C:\\Games\\SaveGameData",
                    "UploadLocation": "D:\\Backups",
                    "BackupOption": 2,
                    "LastUpdated": "2020-05-31T21:17:34",
                    "IncludeBackupSaveFiles": True,
                    "IncludeDVBackupSaveFiles": False,
                    "AllowDownloadSavegame": True,
                    "KeepAlive": True,
                }
            )
        )

        config = load_configuration(config_file)

        assert config.save_location == "C:\\Games\\SaveGameData"
        assert config.upload_location == "D:\\Backups"
        assert config.backup_option == BackupPreference.ONLY_IN_DANGER
        assert config.last_updated == datetime(2020, 5, 31, 21, 17, 34)
        assert config.keep_alive is True

    def test_load_dotnet_timestamp(self, temp_dir):
        """LastUpdated with seven fractional digits and an offset loads."""
        config_file = temp_dir / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "SaveLocation": "C:\\Games\\SaveGameData",
                    "UploadLocation": "D:\\Backups",
                    "BackupOption": 1,
                    "LastUpdated": "2023-10-19T17:56:12.1234567-04:00",
                    "IncludeBackupSaveFiles": True,
                    "AllowDownloadSavegame": False,
                    "KeepAlive": False,
                }
            )
        )

        config = load_configuration(config_file)

        assert config.last_updated == datetime(
            2023, 10, 19, 17, 56, 12, 123456, tzinfo=timezone(timedelta(hours=-4))
        )
        assert config.backup_option == BackupPreference.ASK_FOR_BACKUP
        assert config.allow_download is False

    def test_empty_path(self):
        """An empty path is a programming error."""
        with pytest.raises(ValueError):
            load_configuration("")

    def test_missing_file(self, temp_dir):
        """A missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Could not find"):
            load_configuration(temp_dir / "config.json")

    def test_malformed_json(self, temp_dir):
        """Malformed JSON raises ConfigError."""
        config_file = temp_dir / "config.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigError, match="Failed to read"):
            load_configuration(config_file)

    def test_non_object_json(self, temp_dir):
        """A JSON document that is not an object is rejected."""
        config_file = temp_dir / "config.json"
        config_file.write_text("[]")

        with pytest.raises(ConfigError, match="JSON object"):
            load_configuration(config_file)

    def test_invalid_values(self, temp_dir):
        """Invalid values raise ConfigError."""
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({"LastUpdated": "yesterday"}))

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_configuration(config_file)


class TestSaveConfiguration:
    """Tests for save_configuration."""

    def test_save_and_load(self, temp_dir):
        """A saved configuration loads back with the same values."""
        config_file = temp_dir / "nested" / "config.json"
        config = SyncConfiguration(
            save_location="/game",
            upload_location="/backup",
            last_updated=datetime(2024, 6, 1, 12, 0, 30),
        )

        save_configuration(config_file, config)

        assert load_configuration(config_file) == config

    def test_written_as_indented_json(self, temp_dir):
        """The file is human readable."""
        config_file = temp_dir / "config.json"
        save_configuration(config_file, SyncConfiguration())

        assert '\n  "SaveLocation"' in config_file.read_text()

    def test_unwritable_path(self, temp_dir):
        """Write errors become ConfigError."""
        blocker = temp_dir / "file"
        blocker.write_text("x")

        with pytest.raises(ConfigError, match="Failed to save"):
            save_configuration(blocker / "config.json", SyncConfiguration())


class TestDefaultConfiguration:
    """Tests for create_default_configuration."""

    def test_creates_defaults(self, temp_dir):
        """The default configuration points at the Steam save folder."""
        config_file = create_default_configuration(temp_dir)
        config = load_configuration(config_file)

        assert config_file == temp_dir / "config.json"
        assert config.save_location == DEFAULT_SAVE_LOCATION
        assert config.upload_location == str(temp_dir / "Saves")
        assert config.backup_option == BackupPreference.ONLY_IN_DANGER
        assert config.last_updated == DEFAULT_LAST_UPDATED
        assert config.include_backup_save_files is True
        assert config.allow_download is True
        assert config.keep_alive is True

    def test_missing_directory(self, temp_dir):
        """The directory must exist."""
        with pytest.raises(ConfigError, match="does not exist"):
            create_default_configuration(temp_dir / "missing")

    def test_default_config_path(self, temp_dir):
        """The default path lives under ~/.config/dvsavesync."""
        with patch("dvsavesync.config.Path.home", return_value=temp_dir):
            assert get_config_path() == temp_dir / ".config" / "dvsavesync" / (
                "config.json"
            )
