"""Filesystem operations used by the sync engine."""

import logging
import shutil
from pathlib import Path

from ..utils import companion_path

logger = logging.getLogger(__name__)


class SaveFileOperations:
    """Copy operations for savegame files.

    All methods raise ``OSError`` on failure; turning errors into results
    is the engine's job.
    """

    def copy_file(
        self, source: Path, destination: Path, overwrite: bool = True
    ) -> None:
        """Copy a file including its modification time.

        Args:
            source: File to copy
            destination: Target path
            overwrite: If False, fail with FileExistsError when the
                destination already exists
        """
        logger.debug(f"Copying '{source}' to '{destination}'")
        if overwrite:
            shutil.copy2(source, destination)
            return

        with open(source, "rb") as src, open(destination, "xb") as dst:
            shutil.copyfileobj(src, dst)
        shutil.copystat(source, destination)

    def copy_companion(self, source: Path, destination: Path) -> None:
        """Copy the ``.bak`` companion of ``source`` next to ``destination``."""
        self.copy_file(companion_path(source), companion_path(destination))
