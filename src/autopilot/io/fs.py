"""
Filesystem helpers for autopilot.io.

Responsibilities
- Directory creation, binary write handles, fsync and atomic renames.
- ``write_text_atomic``: tmp write -> fsync -> os.replace, the only way artifacts and
  bundles reach disk.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same
  filesystem; tmp files are created next to their destination for that reason.
- All helpers are synchronous; callers decide on locking if/when needed.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from .errors import IoWriteError

__all__ = [
    "makedirs",
    "open_write",
    "fsync_file",
    "rename_atomic",
    "write_text_atomic",
]


def makedirs(path: str | os.PathLike[str], exist_ok: bool = True) -> None:
    """Create directories recursively (thin wrapper around os.makedirs)."""
    os.makedirs(path, exist_ok=exist_ok)


@contextmanager
def open_write(path: str | os.PathLike[str]) -> Iterator[BinaryIO]:
    """
    Open a file for binary write as a context manager.

    Notes:
        Caller is responsible for fsync and the atomic os.replace of a tmp path.
    """
    fh = open(path, "wb")
    try:
        yield fh
    finally:
        fh.close()


def fsync_file(fh: BinaryIO) -> None:
    """Flush and fsync an open file handle."""
    fh.flush()
    os.fsync(fh.fileno())


def rename_atomic(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
    """Atomically rename src -> dst on the same filesystem."""
    os.replace(src, dst)


def write_text_atomic(path: str | os.PathLike[str], text: str) -> str:
    """
    Atomically write UTF-8 text, creating parent directories.

    Args:
        path: Final destination path.
        text: Text to write.

    Returns:
        str: The destination path.

    Raises:
        IoWriteError: If any step fails; the tmp file is removed first.
    """
    dst = os.fspath(path)
    parent = os.path.dirname(dst)
    if parent:
        makedirs(parent)
    tmp = dst + ".tmp"
    try:
        with open_write(tmp) as fh:
            fh.write(text.encode("utf-8"))
            fsync_file(fh)
        rename_atomic(tmp, dst)
    except OSError as e:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise IoWriteError(f"atomic write to {dst} failed: {e}") from e
    return dst
