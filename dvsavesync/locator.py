"""Search for the Derail Valley savegame folder.

This only discovers paths; it never touches the savegame itself.
"""

import logging
import os
import string
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

STEAM_DEFAULT_LIBRARY = Path("Program Files (x86)", "Steam", "steamapps", "common")
STEAM_CUSTOM_LIBRARY = Path("SteamLibrary", "steamapps", "common")
SAVE_FOLDER = Path("Derail Valley", "DerailValley_Data", "SaveGameData")


def get_search_roots() -> list[Path]:
    """Return the filesystem roots to search.

    Every existing drive on Windows, ``/`` elsewhere.
    """
    if os.name == "nt":
        drives = [Path(f"{letter}:\\") for letter in string.ascii_uppercase]
        return [drive for drive in drives if drive.exists()]
    return [Path("/")]


def get_steam_libraries(roots: Optional[Iterable[Path]] = None) -> list[Path]:
    """Return candidate Steam ``steamapps/common`` directories.

    Args:
        roots: Roots to probe. Defaults to get_search_roots(); the standard
            Linux Steam locations in the home directory are only added when
            the default roots are used.
    """
    use_defaults = roots is None
    libraries: list[Path] = []
    for root in get_search_roots() if use_defaults else roots:
        libraries.append(Path(root) / STEAM_DEFAULT_LIBRARY)
        libraries.append(Path(root) / STEAM_CUSTOM_LIBRARY)

    if use_defaults and os.name != "nt":
        home = Path.home()
        libraries.append(home / ".steam" / "steam" / "steamapps" / "common")
        libraries.append(home / ".local" / "share" / "Steam" / "steamapps" / "common")
    return libraries


def find_save_folder(roots: Optional[Iterable[Path]] = None) -> Optional[Path]:
    """Find the Derail Valley savegame folder.

    Args:
        roots: Roots to search (see get_steam_libraries)

    Returns:
        The first existing savegame folder, or None
    """
    for library in get_steam_libraries(roots):
        candidate = library / SAVE_FOLDER
        logger.debug(f"Checking: '{candidate}'...")
        if candidate.is_dir():
            logger.debug(f"Found savegame folder: {candidate}")
            return candidate
    return None
