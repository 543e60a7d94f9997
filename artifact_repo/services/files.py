"""
Local file helpers for repository backends.

Walks directory trees in a fixed order and plans whole-directory uploads.
"""

from __future__ import annotations

import os
import posixpath
import stat
from collections.abc import Iterator
from pathlib import Path

from artifact_repo.base_model import StrictModel

__all__ = ['FileTransfer', 'file_exists', 'plan_directory_upload', 'walk_files']


class FileTransfer(StrictModel):
    """One file to copy when uploading a directory."""

    source: str  # Local filesystem path
    dest: str  # Logical repository path


def file_exists(path: Path | str) -> bool:
    """
    Check whether a path exists.

    Only absence returns False; any other stat failure (permissions, I/O)
    propagates so callers can classify it.
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def walk_files(top: Path) -> Iterator[Path]:
    """
    Yield every regular file under top, depth-first in lexical order.

    top itself is followed if it is a symlink. If it is a regular file it is
    the only result. Below top, symlinks and other special files are skipped
    and never followed.

    Raises:
        FileNotFoundError: If top does not exist
        OSError: If any directory cannot be read
    """
    mode = os.stat(top).st_mode
    if stat.S_ISREG(mode):
        yield top
    elif stat.S_ISDIR(mode):
        yield from _walk_directory(top)


def _walk_directory(directory: Path) -> Iterator[Path]:
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.is_file(follow_symlinks=False):
            yield Path(entry.path)
        elif entry.is_dir(follow_symlinks=False):
            yield from _walk_directory(Path(entry.path))


def plan_directory_upload(local_dir: Path, repo_dir: str) -> list[FileTransfer]:
    """
    Compute the file-by-file plan for putting local_dir at repo_dir.

    Args:
        local_dir: Local directory to upload
        repo_dir: Logical destination directory in the repository

    Returns:
        One FileTransfer per regular file, destination preserving the
        relative structure under repo_dir with '/' separators
    """
    return [
        FileTransfer(
            source=str(path),
            dest=posixpath.join(repo_dir, path.relative_to(local_dir).as_posix()),
        )
        for path in walk_files(local_dir)
    ]
