"""Core sync engine for executing savegame sync operations."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import BackupPreference, SyncConfiguration
from ..exceptions import SaveFileNotFoundError
from ..result import FailureKind, OperationResult
from ..utils import SAVEGAME_FILE_NAME, backup_file_names, companion_path
from .comparator import (
    SaveFile,
    SyncAction,
    SyncCompareState,
    SyncDecision,
    compare_save_files,
    decide,
)
from .operations import SaveFileOperations

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Outcome of a full sync run."""

    decision: SyncDecision
    """What the engine decided to do"""

    result: OperationResult = field(default_factory=OperationResult)
    """Result of the executed action"""

    @property
    def action(self) -> SyncAction:
        return self.decision.action

    @property
    def state(self) -> Optional[SyncCompareState]:
        return self.decision.state


def backup_save_file(
    config: SyncConfiguration,
    timestamp: Optional[datetime] = None,
    save_path: Optional[Union[str, Path]] = None,
    operations: Optional[SaveFileOperations] = None,
) -> OperationResult:
    """Copy the local savegame to a timestamped backup next to it.

    Backups never overwrite an existing file, so two backups within the
    same second make the second one fail.

    Args:
        config: Configuration providing the save location and whether the
            companion file is included
        timestamp: Time used in the backup name (defaults to now)
        save_path: Savegame to back up. Defaults to
            ``<save_location>/savegame``
        operations: File operations to use

    Returns:
        OperationResult, failed if any copy failed
    """
    result = OperationResult()
    operations = operations or SaveFileOperations()
    timestamp = timestamp or datetime.now()
    source = (
        Path(save_path)
        if save_path
        else Path(config.save_location) / SAVEGAME_FILE_NAME
    )
    primary_name, companion_name = backup_file_names(timestamp, source.name)

    try:
        operations.copy_file(source, source.with_name(primary_name), overwrite=False)
        if config.include_backup_save_files:
            operations.copy_file(
                companion_path(source),
                source.with_name(companion_name),
                overwrite=False,
            )
        logger.debug(f"Savegame backup created: {source.with_name(primary_name)}")
        result.add_message(f"Savegame backed up to '{primary_name}'.")
    except OSError as e:
        logger.error(f"Error trying to back up the savegame: {e}")
        result.add_failure_message(
            f"An error occurred while trying to back up the savegame: {e}"
        )
    return result


class Synchronizer:
    """Syncs one savegame between a local and a remote location.

    Validation problems (empty paths, missing required files) raise
    ValidationError before anything is copied. Filesystem errors during a
    copy never escape; they are reported through the returned
    OperationResult.
    """

    def __init__(
        self,
        config: SyncConfiguration,
        local_path: Optional[Union[str, Path]] = None,
        remote_path: Optional[Union[str, Path]] = None,
        operations: Optional[SaveFileOperations] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize synchronizer.

        Args:
            config: Sync configuration; ``last_updated`` is updated in place
                after every successful transfer
            local_path: Local savegame. Defaults to
                ``<save_location>/savegame``
            remote_path: Remote savegame. Defaults to
                ``<upload_location>/savegame``
            operations: File operations to use
            clock: Returns the current time
        """
        self.config = config
        self.local_path = (
            local_path
            if local_path is not None
            else self._default_path(config.save_location)
        )
        self.remote_path = (
            remote_path
            if remote_path is not None
            else self._default_path(config.upload_location)
        )
        self.operations = operations or SaveFileOperations()
        self.clock = clock

    @staticmethod
    def _default_path(directory: str) -> str:
        if not directory:
            return ""
        return str(Path(directory) / SAVEGAME_FILE_NAME)

    @property
    def local(self) -> SaveFile:
        return SaveFile.from_path(self.local_path, "Local")

    @property
    def remote(self) -> SaveFile:
        return SaveFile.from_path(self.remote_path, "Remote")

    def evaluate(self, allow_missing_local: bool = False) -> SyncCompareState:
        """Compare local and remote savegames.

        Raises:
            ValidationError: If a path is empty
            SaveFileNotFoundError: If a file required by the mode is missing
        """
        return compare_save_files(self.local, self.remote, allow_missing_local)

    def push_local_to_remote(self) -> OperationResult:
        """Copy the local savegame over the remote one.

        The remote savegame does not need to exist yet.

        Raises:
            ValidationError: If a path is empty or the local file is missing
        """
        local, remote = self.local, self.remote
        if not local.exists:
            raise SaveFileNotFoundError(local.path, "Local")

        result = OperationResult()
        try:
            self.operations.copy_file(local.path, remote.path)
        except OSError as e:
            logger.error(f"Could not push local savegame to remote: {e}")
            result.add_failure_message(
                f"Could not push local savegame to remote: {e}"
            )
            return result

        if self.config.include_backup_save_files:
            self._copy_companion(local.path, remote.path, result)

        self.config.last_updated = self.clock()
        result.add_message("Local savegame has been copied to the remote location.")
        return result

    def download_remote_to_local(self, restore: bool = False) -> OperationResult:
        """Copy the remote savegame over the local one.

        Without ``restore`` the download only happens when the local
        savegame is older than the remote one. With ``restore`` a missing
        local savegame is allowed and the freshness check is skipped.

        Raises:
            ValidationError: If a path is empty, the remote file is missing,
                or the local file is missing outside restore mode
        """
        local, remote = self.local, self.remote
        if not remote.exists:
            raise SaveFileNotFoundError(remote.path, "Remote")
        if not restore and not local.exists:
            raise SaveFileNotFoundError(local.path, "Local")

        result = OperationResult()
        state = compare_save_files(local, remote, allow_missing_local=restore)

        if not restore and state != SyncCompareState.LOCAL_OLDER:
            message = (
                "Local savegame is NOT older than remote savegame, "
                "aborting download to preserve state."
            )
            logger.warning(message)
            result.add_failure_message(message, FailureKind.POLICY_ABORT)
            return result

        if not self.config.allow_download:
            if restore:
                message = "Cannot restore local savegame: downloads are disabled."
            else:
                message = "Remote savegame is newer, but downloading is not allowed."
            logger.warning(message)
            result.add_failure_message(message, FailureKind.POLICY_ABORT)
            return result

        if (
            self.config.backup_option == BackupPreference.ONLY_IN_DANGER
            and local.exists
        ):
            logger.debug("Backing up local savegame before overwriting it")
            backup = backup_save_file(
                self.config,
                timestamp=self.clock(),
                save_path=local.path,
                operations=self.operations,
            )
            if not backup.is_success:
                logger.warning(f"Backup before download failed: {backup}")
            for message in backup.messages:
                result.add_message(message)

        try:
            self.operations.copy_file(remote.path, local.path)
        except OSError as e:
            logger.error(f"Could not download remote savegame to local: {e}")
            result.add_failure_message(
                f"Could not download remote savegame to local: {e}"
            )
            return result

        if self.config.include_backup_save_files:
            self._copy_companion(remote.path, local.path, result)

        self.config.last_updated = self.clock()
        result.add_message("Local savegame has been updated from the remote savegame.")
        return result

    def restore(self) -> OperationResult:
        """Unconditionally pull the remote savegame to the local location."""
        return self.download_remote_to_local(restore=True)

    def sync(self) -> SyncReport:
        """Run one sync: evaluate, decide and execute at most one copy.

        Raises:
            ValidationError: If a path is empty or neither savegame exists
        """
        local, remote = self.local, self.remote

        if not remote.exists:
            if not local.exists:
                raise SaveFileNotFoundError(local.path, "Local")
            decision = SyncDecision(
                state=None,
                action=SyncAction.PUSH,
                reason="No remote savegame found, uploading local savegame",
            )
        else:
            state = compare_save_files(local, remote, allow_missing_local=True)
            decision = decide(state, self.config.allow_download)

        logger.debug(f"Sync decision: {decision.action.value} ({decision.reason})")
        return SyncReport(decision=decision, result=self._execute(decision))

    def _execute(self, decision: SyncDecision) -> OperationResult:
        if decision.action == SyncAction.PUSH:
            return self.push_local_to_remote()
        if decision.action == SyncAction.PULL:
            return self.download_remote_to_local(
                restore=decision.state == SyncCompareState.LOCAL_MISSING
            )

        result = OperationResult()
        if decision.action == SyncAction.ABORT:
            result.add_failure_message(decision.reason, FailureKind.POLICY_ABORT)
        return result

    def _copy_companion(
        self, source: Path, destination: Path, result: OperationResult
    ) -> None:
        """Copy the .bak companion; a failure is reported but not fatal."""
        try:
            self.operations.copy_companion(source, destination)
        except OSError as e:
            logger.warning(f"Could not copy companion file: {e}")
            result.add_message(f"Could not copy companion file: {e}")
