"""Exceptions raised by DVSaveSync."""


class DVSaveSyncError(Exception):
    """Base exception for all DVSaveSync errors."""


class ValidationError(DVSaveSyncError):
    """A required path is empty or a required file is absent.

    Raised before any filesystem operation is attempted.
    """


class SaveFileNotFoundError(ValidationError):
    """A save file required by the current operation does not exist."""

    def __init__(self, path, role: str = "Save"):
        self.path = path
        self.role = role
        super().__init__(f"{role} file not found: '{path}'")


class ConfigError(DVSaveSyncError):
    """The configuration file cannot be read, parsed or written."""
