"""Savegame comparison logic for sync operations."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..exceptions import SaveFileNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class SyncCompareState(str, Enum):
    """Freshness of the local savegame relative to the remote one."""

    LOCAL_NEWER = "local_newer"
    """Local savegame was written after the remote one"""

    LOCAL_OLDER = "local_older"
    """Local savegame was written before the remote one"""

    LOCAL_SAME = "local_same"
    """Both savegames carry the same modification time"""

    LOCAL_MISSING = "local_missing"
    """There is no local savegame"""


class SyncAction(str, Enum):
    """Actions a sync run can take."""

    PUSH = "push"
    """Copy local savegame to remote"""

    PULL = "pull"
    """Copy remote savegame to local"""

    NOOP = "noop"
    """Nothing to do"""

    ABORT = "abort"
    """Refuse to act (reported, not an error)"""


@dataclass(frozen=True)
class SaveFile:
    """A savegame file reference.

    Existence and modification time are read from the filesystem on every
    access, so a decision always sees the current state of the disk.
    """

    path: Path
    """Path to the savegame file"""

    @classmethod
    def from_path(cls, path: Union[str, Path], role: str = "Save") -> "SaveFile":
        """Create a SaveFile, rejecting empty paths.

        Raises:
            ValidationError: If path is empty
        """
        if not path or not str(path).strip():
            raise ValidationError(f"{role} path must not be empty")
        return cls(Path(path))

    @property
    def exists(self) -> bool:
        """True if the path points to an existing file."""
        return self.path.is_file()

    @property
    def mtime_ns(self) -> int:
        """Last modification time in nanoseconds since the epoch."""
        return self.path.stat().st_mtime_ns

    @property
    def mtime(self) -> Optional[float]:
        """Last modification time (Unix timestamp), None if missing."""
        if not self.exists:
            return None
        return self.path.stat().st_mtime


@dataclass
class SyncDecision:
    """Represents a decision about how to sync the savegame."""

    state: Optional[SyncCompareState]
    """Evaluated freshness, None when the remote savegame does not exist yet"""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""


def compare_save_files(
    local: SaveFile, remote: SaveFile, allow_missing_local: bool = False
) -> SyncCompareState:
    """Compare two savegame files by modification time.

    Args:
        local: Local savegame
        remote: Remote savegame
        allow_missing_local: Report a missing local file as LOCAL_MISSING
            instead of raising

    Returns:
        The evaluated SyncCompareState

    Raises:
        SaveFileNotFoundError: If a file required by the mode is missing
    """
    if not local.exists:
        if allow_missing_local:
            logger.debug(f"Local savegame missing: {local.path}")
            return SyncCompareState.LOCAL_MISSING
        raise SaveFileNotFoundError(local.path, "Local")
    if not remote.exists:
        raise SaveFileNotFoundError(remote.path, "Remote")

    local_mtime = local.mtime_ns
    remote_mtime = remote.mtime_ns
    logger.debug(f"Local mtime: {local_mtime}, remote mtime: {remote_mtime}")

    if local_mtime < remote_mtime:
        return SyncCompareState.LOCAL_OLDER
    if local_mtime == remote_mtime:
        return SyncCompareState.LOCAL_SAME
    return SyncCompareState.LOCAL_NEWER


def evaluate(
    local_path: Union[str, Path],
    remote_path: Union[str, Path],
    allow_missing_local: bool = False,
) -> SyncCompareState:
    """Evaluate the sync state of a local and a remote savegame path.

    Both paths are validated before the filesystem is touched.

    Raises:
        ValidationError: If either path is empty
        SaveFileNotFoundError: If a file required by the mode is missing
    """
    local = SaveFile.from_path(local_path, "Local")
    remote = SaveFile.from_path(remote_path, "Remote")
    return compare_save_files(local, remote, allow_missing_local)


def decide(state: SyncCompareState, allow_download: bool) -> SyncDecision:
    """Map an evaluated state and the download policy to an action."""
    if state == SyncCompareState.LOCAL_NEWER:
        return SyncDecision(
            state=state,
            action=SyncAction.PUSH,
            reason="Local savegame is newer than remote savegame",
        )

    if state == SyncCompareState.LOCAL_SAME:
        return SyncDecision(
            state=state,
            action=SyncAction.NOOP,
            reason="Local and remote savegames are the same",
        )

    if state == SyncCompareState.LOCAL_OLDER:
        if allow_download:
            return SyncDecision(
                state=state,
                action=SyncAction.PULL,
                reason="Remote savegame is newer than local savegame",
            )
        return SyncDecision(
            state=state,
            action=SyncAction.ABORT,
            reason="Remote savegame is newer, but downloading is not allowed",
        )

    # LOCAL_MISSING
    if allow_download:
        return SyncDecision(
            state=state,
            action=SyncAction.PULL,
            reason="Local savegame is missing, restoring from remote",
        )
    return SyncDecision(
        state=state,
        action=SyncAction.ABORT,
        reason="Local savegame is missing, cannot restore: downloads are disabled",
    )
