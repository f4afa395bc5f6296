"""Utility functions for DVSaveSync."""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

# =============================================================================
# Savegame file naming
# =============================================================================

SAVEGAME_FILE_NAME: str = "savegame"

# Suffix of the game's own companion file (savegame.bak)
COMPANION_SUFFIX: str = ".bak"

# Infix that marks backups made by DVSaveSync
BACKUP_INFIX: str = "-dvss_"


def companion_path(save_path: Union[str, Path]) -> Path:
    """Return the path of the game's ``.bak`` companion for a save file.

    Examples:
        >>> companion_path("/saves/savegame").as_posix()
        '/saves/savegame.bak'
    """
    save_path = Path(save_path)
    return save_path.with_name(save_path.name + COMPANION_SUFFIX)


# =============================================================================
# Timestamp formatting
# =============================================================================


def format_backup_timestamp(timestamp: datetime) -> str:
    """Format a timestamp as year-day-month-hour-minute-second.

    The month is not zero padded, matching backups made by earlier
    releases.

    Examples:
        >>> format_backup_timestamp(datetime(2024, 3, 7, 9, 5, 2))
        '2024-07-3-09-05-02'
    """
    return (
        f"{timestamp:%Y}-{timestamp:%d}-{timestamp.month}-"
        f"{timestamp:%H}-{timestamp:%M}-{timestamp:%S}"
    )


def backup_file_names(
    timestamp: datetime, base_name: str = SAVEGAME_FILE_NAME
) -> tuple[str, str]:
    """Return (primary, companion) backup file names for a timestamp.

    Examples:
        >>> primary, companion = backup_file_names(datetime(2024, 3, 7, 9, 5, 2))
        >>> primary
        'savegame-dvss_2024-07-3-09-05-02.bak'
        >>> companion
        'savegame-dvss_2024-07-3-09-05-02_bak.bak'
    """
    stamp = format_backup_timestamp(timestamp)
    base = f"{base_name}{BACKUP_INFIX}{stamp}"
    return f"{base}.bak", f"{base}_bak.bak"


def format_mtime(mtime: Optional[float]) -> str:
    """Format a Unix timestamp for display, or "missing" for None."""
    if mtime is None:
        return "missing"
    return datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M:%S")
