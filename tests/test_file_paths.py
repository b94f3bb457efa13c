import os

import pytest

from actirec.dataio import file_paths


def test_first_session_in_empty_dir_is_1(tmp_path) -> None:
    created = file_paths.allocate_session_dir(tmp_path)
    assert created == tmp_path / "1"
    assert created.is_dir()


def test_next_name_counts_entries_not_max(tmp_path) -> None:
    for name in ("1", "2", "4"):
        (tmp_path / name).mkdir()

    assert file_paths.next_session_dir(tmp_path) == tmp_path / "4"
    with pytest.raises(FileExistsError):
        file_paths.allocate_session_dir(tmp_path)


def test_files_count_as_entries(tmp_path) -> None:
    (tmp_path / "1").mkdir()
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    assert file_paths.allocate_session_dir(tmp_path) == tmp_path / "3"


def test_unreadable_entries_are_skipped(tmp_path, monkeypatch, caplog) -> None:
    for name in ("1", "2", "bad"):
        (tmp_path / name).mkdir()
    real_lstat = os.lstat

    def flaky_lstat(path, *args, **kwargs):
        if os.path.basename(path) == "bad":
            raise PermissionError("denied")
        return real_lstat(path, *args, **kwargs)

    monkeypatch.setattr(file_paths.os, "lstat", flaky_lstat)

    assert file_paths.next_session_dir(tmp_path) == tmp_path / "3"
    assert "bad" in caplog.text


def test_missing_base_dir_is_invalid(tmp_path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        file_paths.allocate_session_dir(tmp_path / "nope")


def test_file_base_dir_is_invalid(tmp_path) -> None:
    target = tmp_path / "file"
    target.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="is not a directory"):
        file_paths.validate_base_dir(target)
