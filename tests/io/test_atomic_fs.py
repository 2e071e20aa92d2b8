from __future__ import annotations

from pathlib import Path

import pytest

from autopilot.io.errors import IoWriteError
from autopilot.io.fs import fsync_file, open_write, rename_atomic, write_text_atomic


def test_write_text_atomic_creates_parents(tmp_path: Path) -> None:
    dst = tmp_path / "a" / "b" / "out.json"
    path = write_text_atomic(dst, '{"k": "é"}\n')
    assert path == str(dst)
    assert dst.read_text(encoding="utf-8") == '{"k": "é"}\n'
    assert not (tmp_path / "a" / "b" / "out.json.tmp").exists()


def test_write_text_atomic_replaces_existing(tmp_path: Path) -> None:
    dst = tmp_path / "out.txt"
    dst.write_text("old")
    write_text_atomic(dst, "new")
    assert dst.read_text() == "new"


def test_failed_replace_cleans_tmp(tmp_path: Path) -> None:
    # Destination is a directory, so os.replace fails after the tmp write.
    dst = tmp_path / "taken"
    dst.mkdir()
    with pytest.raises(IoWriteError, match="atomic write"):
        write_text_atomic(dst, "data")
    assert not (tmp_path / "taken.tmp").exists()


def test_low_level_helpers(tmp_path: Path) -> None:
    tmp = tmp_path / "x.tmp"
    with open_write(tmp) as fh:
        fh.write(b"abc")
        fsync_file(fh)
    rename_atomic(tmp, tmp_path / "x")
    assert (tmp_path / "x").read_bytes() == b"abc"
    assert not tmp.exists()
