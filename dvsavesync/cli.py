"""CLI interface for DVSaveSync."""

import logging
from enum import IntEnum
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .config import (
    CONFIG_ENV_VAR,
    BackupPreference,
    SyncConfiguration,
    default_configuration,
    get_config_path,
    load_configuration,
    save_configuration,
)
from .exceptions import ConfigError, SaveFileNotFoundError, ValidationError
from .locator import find_save_folder
from .output import OutputFormatter
from .result import OperationResult
from .sync import SaveFile, Synchronizer, backup_save_file, decide
from .sync.comparator import SyncAction, compare_save_files
from .utils import SAVEGAME_FILE_NAME, format_mtime

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Process exit codes."""

    NO_ERRORS = 0
    COULD_NOT_FIND_SAVE_FILES = 1
    COULD_NOT_FIND_PATH = 2
    ERROR_DURING_OPERATIONS = 3


def exit_code_for(error: Exception) -> ExitCode:
    """Map an exception to the exit code reported for it."""
    if isinstance(error, SaveFileNotFoundError):
        return ExitCode.COULD_NOT_FIND_SAVE_FILES
    if isinstance(error, ValidationError):
        return ExitCode.COULD_NOT_FIND_PATH
    return ExitCode.ERROR_DURING_OPERATIONS


def _setup_logging(verbose: bool, log_file: Optional[str]) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("dvsavesync").setLevel(logging.DEBUG)
    else:
        # The console handler filters on its own level; the --log-file branch
        # below lowers the package logger to DEBUG.
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        logging.basicConfig(level=logging.WARNING, handlers=[console_handler])

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        package_logger = logging.getLogger("dvsavesync")
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG)


def _load_config(ctx: Any, out: OutputFormatter) -> SyncConfiguration:
    """Load the configuration, writing the defaults first if it is missing."""
    config_path: Path = ctx.obj["config_path"]
    try:
        if not config_path.exists():
            out.warning(
                f"No configuration found, generating default config at {config_path}"
            )
            save_configuration(config_path, default_configuration(config_path.parent))
        return load_configuration(config_path)
    except ConfigError as e:
        out.error(str(e))
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)


def _save_config(ctx: Any, out: OutputFormatter, config: SyncConfiguration) -> bool:
    try:
        save_configuration(ctx.obj["config_path"], config)
    except ConfigError as e:
        out.error(str(e))
        return False
    return True


def _confirm(ctx: Any, text: str) -> bool:
    if ctx.obj.get("yes"):
        return True
    return click.confirm(text, default=False)


def _report(out: OutputFormatter, result: OperationResult) -> None:
    """Print the messages of a result."""
    for message in result.messages:
        if result.is_success:
            out.info(message)
        elif result.aborted:
            out.warning(message)
        else:
            out.error(message)


def _keep_alive(config: SyncConfiguration) -> None:
    if config.keep_alive:
        click.pause("Press Enter to close.")


@click.group()
@click.option(
    "--config",
    "config_path",
    envvar=CONFIG_ENV_VAR,
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the configuration file (default: ~/.config/dvsavesync/config.json)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write debug logs to this file",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: Any,
    config_path: Optional[Path],
    quiet: bool,
    json: bool,
    verbose: bool,
    log_file: Optional[str],
) -> None:
    """DVSaveSync - Sync your Derail Valley savegame with a backup folder."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path or get_config_path()
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    _setup_logging(verbose, log_file)


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration")
@click.pass_context
def init(ctx: Any, force: bool) -> None:
    """Create a default configuration file.

    Edit the generated file to point SaveLocation at the game's
    SaveGameData folder and UploadLocation at your backup folder.
    """
    out: OutputFormatter = ctx.obj["out"]
    config_path: Path = ctx.obj["config_path"]

    if config_path.exists() and not force:
        out.error(
            f"Configuration already exists at {config_path}. Use --force to overwrite."
        )
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)

    config = default_configuration(config_path.parent)
    if not _save_config(ctx, out, config):
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)

    out.success(f"Configuration saved to {config_path}")
    out.print_summary(
        "Default Configuration",
        [
            ("Save location", config.save_location),
            ("Upload location", config.upload_location),
            ("Backup option", config.backup_option.name),
        ],
    )


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Answer yes to every prompt")
@click.pass_context
def sync(ctx: Any, yes: bool) -> None:  # noqa: C901
    """Sync the savegame with the upload location.

    The newer savegame wins: a newer local savegame is copied to the upload
    location, a newer remote savegame is copied over the local one (if
    downloads are allowed).

    Examples:
        dvsavesync sync
        dvsavesync --config ./config.json sync --yes
    """
    out: OutputFormatter = ctx.obj["out"]
    ctx.obj["yes"] = yes
    config = _load_config(ctx, out)

    # Resolve the local savegame folder
    save_dir = Path(config.save_location) if config.save_location else None
    if save_dir is None or not save_dir.is_dir():
        out.warning(f"Could not find the savegame folder: '{config.save_location}'")
        if not _confirm(ctx, "Would you like to search for the game folder?"):
            out.error("Cannot continue without savegame folder location.")
            ctx.exit(ExitCode.COULD_NOT_FIND_PATH)
        out.info("Searching for Derail Valley savegame folder...")
        found = find_save_folder()
        if found is None:
            out.error(f"Could not find savegame folder: '{config.save_location}'")
            ctx.exit(ExitCode.COULD_NOT_FIND_PATH)
        config.save_location = str(found)
        save_dir = found
        out.success(f"Found the game folder at: {found}")

    # Resolve the upload folder
    upload_dir = Path(config.upload_location) if config.upload_location else None
    if upload_dir is None:
        out.error("No upload location configured; cannot continue.")
        ctx.exit(ExitCode.COULD_NOT_FIND_PATH)
    if not upload_dir.is_dir():
        out.warning(f"The upload folder '{upload_dir}' does not exist.")
        if not _confirm(ctx, "Create upload folder?"):
            out.error("No upload location; cannot continue.")
            ctx.exit(ExitCode.COULD_NOT_FIND_PATH)
        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            out.error(f"Could not create upload folder: {e}")
            ctx.exit(ExitCode.COULD_NOT_FIND_PATH)
        out.info(f"Created upload folder: {upload_dir}")

    synchronizer = Synchronizer(config)
    local = SaveFile(save_dir / SAVEGAME_FILE_NAME)

    if not local.exists:
        out.warning("The savegame folder holds no savegame.")
        if not _confirm(ctx, "Download your savegame from the upload location?"):
            out.error("No savegame files found! Is the game folder location correct?")
            ctx.exit(ExitCode.COULD_NOT_FIND_SAVE_FILES)
    else:
        backup_option = config.backup_option
        if backup_option == BackupPreference.ALWAYS_BACKUP or (
            backup_option == BackupPreference.ASK_FOR_BACKUP
            and _confirm(ctx, "Would you like to back up the current savegame?")
        ):
            backup = backup_save_file(config, save_path=local.path)
            if not backup.is_success:
                _report(out, backup)
                out.error("There was an error backing up the savegame.")
                ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)
            _report(out, backup)

    try:
        report = synchronizer.sync()
    except ValidationError as e:
        out.error(str(e))
        ctx.exit(exit_code_for(e))

    if report.action != SyncAction.ABORT:
        out.info(report.decision.reason)
    _report(out, report.result)
    saved = _save_config(ctx, out, config)

    if not report.result.is_success and not report.result.aborted:
        out.error("Sync failed, check the logs for details.")
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)
    if not saved:
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)

    if report.action in (SyncAction.PUSH, SyncAction.PULL):
        out.success("DVSaveSync has completed.")
    _keep_alive(config)


@main.command()
@click.pass_context
def restore(ctx: Any) -> None:
    """Restore the savegame from the upload location.

    Overwrites the local savegame with the remote one regardless of which
    is newer. A missing local savegame is allowed.
    """
    out: OutputFormatter = ctx.obj["out"]
    config = _load_config(ctx, out)
    synchronizer = Synchronizer(config)

    out.info("Restoring previous savegame...")
    try:
        result = synchronizer.restore()
    except ValidationError as e:
        out.error(str(e))
        ctx.exit(exit_code_for(e))

    _report(out, result)
    if not result.is_success:
        out.error("Could not restore savegame files, please review logs.")
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)

    if not _save_config(ctx, out, config):
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)
    out.success("Savegame files have been restored.")


@main.command()
@click.pass_context
def backup(ctx: Any) -> None:
    """Create a timestamped backup of the local savegame."""
    out: OutputFormatter = ctx.obj["out"]
    config = _load_config(ctx, out)

    try:
        local = Synchronizer(config).local
    except ValidationError as e:
        out.error(str(e))
        ctx.exit(exit_code_for(e))
    if not local.exists:
        out.error(f"Local file not found: '{local.path}'")
        ctx.exit(ExitCode.COULD_NOT_FIND_SAVE_FILES)

    result = backup_save_file(config, save_path=local.path)
    _report(out, result)
    if not result.is_success:
        ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)


@main.command()
@click.pass_context
def status(ctx: Any) -> None:
    """Show both savegames and what a sync would do, without copying."""
    out: OutputFormatter = ctx.obj["out"]
    config = _load_config(ctx, out)
    synchronizer = Synchronizer(config)

    try:
        local, remote = synchronizer.local, synchronizer.remote
        if not remote.exists:
            if not local.exists:
                raise SaveFileNotFoundError(local.path, "Local")
            state_name = "remote_missing"
            action, reason = SyncAction.PUSH, "No remote savegame found"
        else:
            decision = decide(
                compare_save_files(local, remote, allow_missing_local=True),
                config.allow_download,
            )
            state_name = decision.state.value
            action, reason = decision.action, decision.reason
    except ValidationError as e:
        out.error(str(e))
        ctx.exit(exit_code_for(e))

    if out.json_output:
        out.output_json(
            {
                "local": {"path": str(local.path), "mtime": local.mtime},
                "remote": {"path": str(remote.path), "mtime": remote.mtime},
                "state": state_name,
                "action": action.value,
                "reason": reason,
                "last_updated": config.last_updated.isoformat(),
            }
        )
        return

    out.print_summary(
        "Savegame Status",
        [
            ("Local", f"{local.path} ({format_mtime(local.mtime)})"),
            ("Remote", f"{remote.path} ({format_mtime(remote.mtime)})"),
            ("State", state_name),
            ("Action", action.value),
            ("Last updated", config.last_updated.strftime("%Y-%m-%d %H:%M:%S")),
        ],
    )
    out.info(reason)


@main.command()
@click.option("--save", "-s", is_flag=True, help="Store the found folder in the config")
@click.pass_context
def locate(ctx: Any, save: bool) -> None:
    """Search the drives for the Derail Valley savegame folder."""
    out: OutputFormatter = ctx.obj["out"]

    out.info("Searching for Derail Valley savegame folder...")
    found = find_save_folder()
    if found is None:
        out.error("Unable to find the savegame folder.")
        ctx.exit(ExitCode.COULD_NOT_FIND_PATH)

    out.success(f"Found Derail Valley savegame folder at: '{found}'")
    if save:
        config = _load_config(ctx, out)
        config.save_location = str(found)
        if not _save_config(ctx, out, config):
            ctx.exit(ExitCode.ERROR_DURING_OPERATIONS)
        out.info(f"Configuration updated: {ctx.obj['config_path']}")


if __name__ == "__main__":
    main()
