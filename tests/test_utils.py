"""Unit tests for utility functions."""

from datetime import datetime
from pathlib import Path

from dvsavesync.utils import (
    backup_file_names,
    companion_path,
    format_backup_timestamp,
    format_mtime,
)


class TestFormatBackupTimestamp:
    """Tests for format_backup_timestamp function."""

    def test_year_day_month_order(self):
        """Fields are ordered year, day, month, hour, minute, second."""
        assert format_backup_timestamp(datetime(2023, 11, 25, 18, 42, 9)) == (
            "2023-25-11-18-42-09"
        )

    def test_single_digit_month_is_not_padded(self):
        """The month is written without a leading zero."""
        assert format_backup_timestamp(datetime(2024, 3, 7, 9, 5, 2)) == (
            "2024-07-3-09-05-02"
        )


class TestBackupFileNames:
    """Tests for backup_file_names function."""

    def test_names(self):
        """Primary and companion backups share the timestamp."""
        primary, companion = backup_file_names(datetime(2024, 3, 7, 9, 5, 2))

        assert primary == "savegame-dvss_2024-07-3-09-05-02.bak"
        assert companion == "savegame-dvss_2024-07-3-09-05-02_bak.bak"

    def test_custom_base_name(self):
        """A different base name replaces 'savegame'."""
        primary, _ = backup_file_names(datetime(2024, 3, 7, 9, 5, 2), "slot1")

        assert primary == "slot1-dvss_2024-07-3-09-05-02.bak"


class TestCompanionPath:
    """Tests for companion_path function."""

    def test_appends_bak(self):
        """The companion sits next to the savegame with a .bak suffix."""
        assert companion_path(Path("/saves/savegame")) == Path("/saves/savegame.bak")

    def test_accepts_strings(self):
        """String paths are accepted."""
        assert companion_path("savegame") == Path("savegame.bak")


class TestFormatMtime:
    """Tests for format_mtime function."""

    def test_missing(self):
        """None is shown as missing."""
        assert format_mtime(None) == "missing"

    def test_formats_local_time(self):
        """Timestamps are shown in local time."""
        expected = datetime.fromtimestamp(1_600_000_000).strftime("%Y-%m-%d %H:%M:%S")
        assert format_mtime(1_600_000_000) == expected
