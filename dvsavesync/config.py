"""Configuration handling for DVSaveSync.

The configuration is stored as indented JSON. Key names match the files
written by earlier DVSaveSync releases so existing configurations keep
working.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Union

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
"""Name of the configuration file inside the config directory"""

CONFIG_ENV_VAR = "DVSAVESYNC_CONFIG"
"""Environment variable that overrides the configuration file path"""

DEFAULT_SAVE_LOCATION = (
    "C:\\Program Files (x86)\\Steam\\steamapps\\common\\Derail Valley"
    "\\DerailValley_Data\\SaveGameData"
)

DEFAULT_LAST_UPDATED = datetime(2020, 5, 31, 21, 17, 34)

_FRACTION_RE = re.compile(r"\.(\d+)")


class BackupPreference(IntEnum):
    """When a timestamped backup of the local save should be made."""

    DO_NOT_BACKUP = 0
    ASK_FOR_BACKUP = 1
    ONLY_IN_DANGER = 2
    """Only right before the local save gets overwritten"""
    ALWAYS_BACKUP = 3


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 ``LastUpdated`` value.

    Files written by the .NET releases of DVSaveSync use seven fractional
    digits and may end in ``Z``; both are normalized before parsing.

    >>> parse_timestamp("2023-10-19T17:56:12.1234567-04:00").microsecond
    123456

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    match = _FRACTION_RE.search(value)
    if match:
        fraction = match.group(1)[:6].ljust(6, "0")
        value = value[: match.start()] + "." + fraction + value[match.end() :]
    return datetime.fromisoformat(value)


def get_config_dir() -> Path:
    """Return the default configuration directory (~/.config/dvsavesync)."""
    return Path.home() / ".config" / "dvsavesync"


def get_config_path() -> Path:
    """Return the default configuration file path."""
    return get_config_dir() / CONFIG_FILE_NAME


@dataclass
class SyncConfiguration:
    """Settings that drive a sync run.

    Only ``last_updated`` is ever changed by the sync engine; everything
    else is owned by the user.
    """

    save_location: str = DEFAULT_SAVE_LOCATION
    """Directory holding the game's own savegame file"""

    upload_location: str = ""
    """Backup/share directory the savegame is "uploaded" to"""

    backup_option: BackupPreference = BackupPreference.ONLY_IN_DANGER
    """Preference for making timestamped backups of the local savegame"""

    last_updated: datetime = field(default_factory=lambda: DEFAULT_LAST_UPDATED)
    """Time of the last successful transfer"""

    include_backup_save_files: bool = True
    """Mirror the game's savegame.bak companion alongside savegame"""

    allow_download: bool = True
    """Allow overwriting the local savegame with a newer remote one"""

    keep_alive: bool = False
    """Wait for Enter before the console closes"""

    def __post_init__(self) -> None:
        if not isinstance(self.backup_option, BackupPreference):
            self.backup_option = BackupPreference(int(self.backup_option))

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for JSON serialization."""
        return {
            "SaveLocation": self.save_location,
            "UploadLocation": self.upload_location,
            "BackupOption": int(self.backup_option),
            "LastUpdated": self.last_updated.isoformat(),
            "IncludeBackupSaveFiles": self.include_backup_save_files,
            "AllowDownloadSavegame": self.allow_download,
            "KeepAlive": self.keep_alive,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SyncConfiguration":
        """Create SyncConfiguration from dictionary.

        Raises:
            ValueError: If a value has the wrong type or an unknown enum value
        """
        last_updated = data.get("LastUpdated")
        return cls(
            save_location=data.get("SaveLocation") or "",
            upload_location=data.get("UploadLocation") or "",
            backup_option=BackupPreference(
                int(data.get("BackupOption", BackupPreference.ONLY_IN_DANGER))
            ),
            last_updated=(
                parse_timestamp(last_updated)
                if last_updated
                else DEFAULT_LAST_UPDATED
            ),
            include_backup_save_files=bool(data.get("IncludeBackupSaveFiles", True)),
            allow_download=bool(data.get("AllowDownloadSavegame", True)),
            keep_alive=bool(data.get("KeepAlive", False)),
        )


def load_configuration(file_path: Union[str, Path]) -> SyncConfiguration:
    """Load a configuration file.

    Args:
        file_path: Path to the JSON configuration file

    Returns:
        Loaded SyncConfiguration

    Raises:
        ValueError: If file_path is empty
        ConfigError: If the file is missing, unreadable or invalid
    """
    if not file_path:
        raise ValueError("Configuration path must not be empty")

    path = Path(file_path)
    if not path.is_file():
        raise ConfigError(f"Could not find configuration file '{path}'")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read configuration file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{path}' must contain a JSON object")

    try:
        config = SyncConfiguration.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in '{path}': {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    logger.debug(f"Local save path: {config.save_location}")
    logger.debug(f"Upload path: {config.upload_location}")
    return config


def save_configuration(
    file_path: Union[str, Path], config: SyncConfiguration
) -> None:
    """Write a configuration file as indented JSON.

    Raises:
        ConfigError: If the file cannot be written
    """
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
    except OSError as e:
        raise ConfigError(f"Failed to save configuration file '{path}': {e}") from e
    logger.debug(f"Saved configuration to {path}")


def default_configuration(config_dir: Union[str, Path]) -> SyncConfiguration:
    """Return the configuration written for first-time users.

    The upload location defaults to ``<config_dir>/Saves``.
    """
    return SyncConfiguration(
        save_location=DEFAULT_SAVE_LOCATION,
        upload_location=str(Path(config_dir) / "Saves"),
        backup_option=BackupPreference.ONLY_IN_DANGER,
        last_updated=DEFAULT_LAST_UPDATED,
        include_backup_save_files=True,
        allow_download=True,
        keep_alive=True,
    )


def create_default_configuration(directory: Union[str, Path]) -> Path:
    """Write a default configuration file into ``directory``.

    Args:
        directory: Existing directory that receives config.json

    Returns:
        Path to the written configuration file

    Raises:
        ConfigError: If the directory does not exist or cannot be written
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ConfigError(f"Configuration directory does not exist: {directory}")

    config_path = directory / CONFIG_FILE_NAME
    save_configuration(config_path, default_configuration(directory))
    return config_path
