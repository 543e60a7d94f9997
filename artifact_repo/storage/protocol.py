"""
Repository protocol shared by every storage backend.

Defines the interface for different backends (local disk now; object stores
such as S3 or GCS would conform to the same contract). Logical paths are
'/'-separated and relative to the repository root.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from artifact_repo.types import ListResult


@runtime_checkable
class Repository(Protocol):
    """Protocol for artifact repository backends."""

    def root_url(self) -> str:
        """URL identifying the repository root (e.g. file:///abs/path)."""
        ...

    def get(self, path: str) -> bytes:
        """
        Read the file at path.

        Raises:
            DoesNotExistError: If path does not exist
            ReadError: If reading fails
        """
        ...

    def put(self, path: str, data: bytes) -> None:
        """
        Write data to path, replacing any existing content.

        Raises:
            WriteError: If writing fails
        """
        ...

    def get_directory(self, repo_dir: str, local_dir: Path) -> None:
        """
        Recursively copy repo_dir to local_dir.

        Raises:
            ReadError: If copying fails
        """
        ...

    def put_directory(self, local_dir: Path, repo_dir: str) -> None:
        """
        Recursively put every file of local_dir under repo_dir.

        Not transactional: files written before a failure remain.

        Raises:
            WriteError: If any file cannot be written
        """
        ...

    def get_archive(self, archive_path: str, local_path: Path) -> None:
        """
        Extract a .tar.gz archive to local_path, stripping its top-level folder.

        Raises:
            DoesNotExistError: If the archive does not exist
        """
        ...

    def get_archive_entry(self, archive_path: str, entry_path: str, local_path: Path) -> None:
        """
        Extract a single entry of a .tar.gz archive to local_path/entry_path.

        Raises:
            DoesNotExistError: If the archive does not exist
            ArchiveError: If the archive has no such entry
        """
        ...

    def put_archive(self, local_dir: Path, archive_path: str, include_path: str | None = None) -> None:
        """
        Pack local_dir (or only its include_path) into a .tar.gz at archive_path.

        Raises:
            WriteError: If archive_path does not end with .tar.gz or packing fails
        """
        ...

    def delete(self, path: str) -> None:
        """
        Delete path, recursively if it is a directory. Absent paths are ignored.

        Raises:
            WriteError: If deletion fails
        """
        ...

    def list(self, path: str) -> list[str]:
        """
        List files directly under path, non-recursively.

        Returns paths prefixed with path, ready to pass to get(). Directories
        are not listed. A missing path lists as empty.

        Raises:
            ReadError: If listing fails
        """
        ...

    def list_archive_entries(self, archive_path: str) -> list[str]:
        """
        List entry names of a .tar.gz archive without its top-level folder.

        Raises:
            DoesNotExistError: If the archive does not exist
        """
        ...

    def list_recursive(self, folder: str) -> Iterator[ListResult]:
        """
        Yield every file under folder with its MD5 digest.

        A missing folder yields nothing. Failures are yielded as one final
        ListError rather than raised.
        """
        ...

    def match_filenames_recursive(self, folder: str, filename: str) -> Iterator[ListResult]:
        """Yield every file under folder whose base name equals filename."""
        ...
