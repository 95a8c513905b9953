"""Tests for open and rotation policy"""

import os
from unittest.mock import patch

import pytest

from file_logger.writers.path_expander import PathExpander, ProcessIdentity
from file_logger.writers.rotation_policy import RotationDiagnostic, RotationPolicy

IDENTITY = ProcessIdentity(user_name="tester", pid=100)


def make_policy(tmp_path, max_size=0, max_files=3, name="app.log"):
    expander = PathExpander(str(tmp_path / name), IDENTITY)
    return RotationPolicy(expander, max_size=max_size, max_files=max_files)


def write_file(path, content):
    with open(path, "wb") as f:
        f.write(content)


def read_file(path):
    with open(path, "rb") as f:
        return f.read()


class TestNeedsRotation:
    """Test the replace-or-reuse decision."""

    def test_overwrite_mode_always_rotates(self, tmp_path):
        policy = make_policy(tmp_path, max_size=100)
        assert policy.needs_rotation(0, append=False)

    def test_append_below_limit(self, tmp_path):
        policy = make_policy(tmp_path, max_size=100)
        assert not policy.needs_rotation(99, append=True)

    def test_append_at_limit(self, tmp_path):
        policy = make_policy(tmp_path, max_size=100)
        assert policy.needs_rotation(100, append=True)

    def test_unlimited_size_never_rotates_appends(self, tmp_path):
        policy = make_policy(tmp_path, max_size=0)
        assert not policy.needs_rotation(10 ** 9, append=True)

    def test_max_files_must_be_positive(self, tmp_path):
        with pytest.raises(ValueError):
            make_policy(tmp_path, max_files=0)


class TestBackupChain:
    """Test discovery of existing log files."""

    def test_no_files(self, tmp_path):
        policy = make_policy(tmp_path)
        assert policy.backup_chain() == [str(tmp_path / "app.log")]

    def test_stops_after_first_missing(self, tmp_path):
        write_file(tmp_path / "app.log", b"0")
        write_file(tmp_path / "app.1.log", b"1")
        policy = make_policy(tmp_path, max_files=5)

        assert policy.backup_chain() == [
            str(tmp_path / "app.log"),
            str(tmp_path / "app.1.log"),
            str(tmp_path / "app.2.log"),
        ]

    def test_limited_by_max_files(self, tmp_path):
        for name in ("app.log", "app.1.log", "app.2.log", "app.3.log"):
            write_file(tmp_path / name, b"x")
        policy = make_policy(tmp_path, max_files=3)

        assert len(policy.backup_chain()) == 3


class TestShiftBackups:
    """Test moving files up the chain."""

    def test_shift_with_free_slot(self, tmp_path):
        write_file(tmp_path / "app.log", b"current")
        write_file(tmp_path / "app.1.log", b"previous")
        policy = make_policy(tmp_path, max_files=3)

        assert policy.shift_backups() == []

        assert not (tmp_path / "app.log").exists()
        assert read_file(tmp_path / "app.1.log") == b"current"
        assert read_file(tmp_path / "app.2.log") == b"previous"

    def test_oldest_dropped_when_full(self, tmp_path):
        write_file(tmp_path / "app.log", b"c")
        write_file(tmp_path / "app.1.log", b"b")
        write_file(tmp_path / "app.2.log", b"a")
        policy = make_policy(tmp_path, max_files=3)

        policy.shift_backups()

        assert read_file(tmp_path / "app.1.log") == b"c"
        assert read_file(tmp_path / "app.2.log") == b"b"
        assert not (tmp_path / "app.3.log").exists()

    def test_single_slot_keeps_no_backup(self, tmp_path):
        write_file(tmp_path / "app.log", b"c")
        policy = make_policy(tmp_path, max_files=1)

        policy.shift_backups()

        assert (tmp_path / "app.log").exists()
        assert not (tmp_path / "app.1.log").exists()

    def test_directory_in_slot_drops_source(self, tmp_path):
        write_file(tmp_path / "app.log", b"c")
        os.mkdir(tmp_path / "app.1.log")
        policy = make_policy(tmp_path, max_files=3)

        policy.shift_backups()

        assert not (tmp_path / "app.log").exists()
        assert (tmp_path / "app.1.log").is_dir()

    def test_failed_rename_continues(self, tmp_path):
        write_file(tmp_path / "app.log", b"c")
        write_file(tmp_path / "app.1.log", b"b")
        policy = make_policy(tmp_path, max_files=3)

        with patch("file_logger.writers.rotation_policy.os.rename",
                   side_effect=OSError("busy")) as rename:
            diagnostics = policy.shift_backups()

        assert rename.call_count == 2
        assert [d.operation for d in diagnostics] == ["rename", "rename"]
        assert all(isinstance(d, RotationDiagnostic) for d in diagnostics)

    def test_undeletable_destination_drops_source(self, tmp_path):
        write_file(tmp_path / "app.log", b"c")
        write_file(tmp_path / "app.1.log", b"b")
        policy = make_policy(tmp_path, max_files=2)
        real_unlink = os.unlink
        target = str(tmp_path / "app.1.log")

        def fake_unlink(path):
            if path == target:
                raise PermissionError("denied")
            real_unlink(path)

        with patch("file_logger.writers.rotation_policy.os.unlink", side_effect=fake_unlink):
            diagnostics = policy.shift_backups()

        assert diagnostics[0].operation == "unlink"
        assert diagnostics[0].path == target
        assert not (tmp_path / "app.log").exists()
        assert read_file(tmp_path / "app.1.log") == b"b"


class TestOpenForWrite:
    """Test opening the active file."""

    def test_new_file(self, tmp_path):
        policy = make_policy(tmp_path, max_size=100)
        result = policy.open_for_write(0, append=True)
        try:
            assert result.ok
            assert not result.rotated
            assert result.size == 0
            assert (tmp_path / "app.log").exists()
        finally:
            result.file.close()

    def test_append_to_small_file(self, tmp_path):
        write_file(tmp_path / "app.log", b"hello")
        policy = make_policy(tmp_path, max_size=100)

        result = policy.open_for_write(0, append=True)
        result.file.write(b" world")
        result.file.close()

        assert not result.rotated
        assert result.size == 5
        assert result.append is True
        assert read_file(tmp_path / "app.log") == b"hello world"
        assert not (tmp_path / "app.1.log").exists()

    def test_overwrite_rotates_existing(self, tmp_path):
        write_file(tmp_path / "app.log", b"old run")
        policy = make_policy(tmp_path, max_size=0)

        result = policy.open_for_write(0, append=False)
        result.file.close()

        assert result.rotated
        assert result.size == 0
        assert read_file(tmp_path / "app.log") == b""
        assert read_file(tmp_path / "app.1.log") == b"old run"

    def test_append_to_full_file_rotates(self, tmp_path):
        write_file(tmp_path / "app.log", b"x" * 10)
        policy = make_policy(tmp_path, max_size=10)

        result = policy.open_for_write(0, append=True)
        result.file.close()

        assert result.rotated
        assert result.append is False
        assert result.size == 0
        assert read_file(tmp_path / "app.1.log") == b"x" * 10

    def test_unlimited_append_keeps_large_file(self, tmp_path):
        write_file(tmp_path / "app.log", b"x" * 4096)
        policy = make_policy(tmp_path, max_size=0)

        result = policy.open_for_write(0, append=True)
        result.file.close()

        assert not result.rotated
        assert result.size == 4096

    def test_overwrite_missing_file_does_not_rotate(self, tmp_path):
        policy = make_policy(tmp_path, max_size=10)
        result = policy.open_for_write(25, append=False)
        result.file.close()

        assert not result.rotated
        assert result.size == 0

    def test_stat_failure_keeps_size(self, tmp_path):
        write_file(tmp_path / "app.log", b"abc")
        policy = make_policy(tmp_path, max_size=100)

        with patch("file_logger.writers.rotation_policy.os.path.exists", return_value=True), \
                patch("file_logger.writers.rotation_policy.os.stat", side_effect=OSError("stat")):
            result = policy.open_for_write(7, append=True)
        result.file.close()

        assert result.size == 7

    def test_open_failure(self, tmp_path):
        policy = make_policy(tmp_path, name="missing/app.log")
        result = policy.open_for_write(0, append=True)

        assert not result.ok
        assert result.diagnostics[-1].operation == "open"
