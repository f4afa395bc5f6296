"""DVSaveSync - keep a Derail Valley savegame in sync with a backup folder."""

from .config import BackupPreference, SyncConfiguration
from .exceptions import (
    ConfigError,
    DVSaveSyncError,
    SaveFileNotFoundError,
    ValidationError,
)
from .result import FailureKind, OperationResult
from .sync import SyncCompareState, Synchronizer, backup_save_file, evaluate

__version__ = "1.0.0"

__all__ = [
    "BackupPreference",
    "SyncConfiguration",
    "Synchronizer",
    "SyncCompareState",
    "OperationResult",
    "FailureKind",
    "DVSaveSyncError",
    "ValidationError",
    "SaveFileNotFoundError",
    "ConfigError",
    "backup_save_file",
    "evaluate",
]
