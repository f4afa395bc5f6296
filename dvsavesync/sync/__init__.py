"""Sync engine for DVSaveSync - savegame comparison and transfer."""

from .comparator import (
    SaveFile,
    SyncAction,
    SyncCompareState,
    SyncDecision,
    compare_save_files,
    decide,
    evaluate,
)
from .engine import Synchronizer, SyncReport, backup_save_file
from .operations import SaveFileOperations

__all__ = [
    "Synchronizer",
    "SyncReport",
    "SyncAction",
    "SyncCompareState",
    "SyncDecision",
    "SaveFile",
    "SaveFileOperations",
    "backup_save_file",
    "compare_save_files",
    "decide",
    "evaluate",
]
