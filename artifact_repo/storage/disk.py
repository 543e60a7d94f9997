"""
Local filesystem repository backend.

Implements the Repository protocol by mapping logical paths directly onto
files under a root directory. The filesystem tree is the whole index: no
metadata files are kept alongside the artifacts.
"""

from __future__ import annotations

import logging
import os
import posixpath
import shutil
from collections.abc import Iterator
from pathlib import Path

from artifact_repo.config.repository import settings
from artifact_repo.exceptions import DoesNotExistError, ReadError, WriteError
from artifact_repo.services import tarball
from artifact_repo.services.files import file_exists, plan_directory_upload
from artifact_repo.services.walker import iter_checksums, iter_filename_matches
from artifact_repo.types import ListResult

__all__ = ['DiskRepository']

logger = logging.getLogger(__name__)


class DiskRepository:
    """Repository stored in a directory on the local filesystem."""

    def __init__(self, root_dir: Path | str) -> None:
        """
        Initialize disk repository.

        The root does not have to exist yet; it is created by the first write.

        Args:
            root_dir: Directory holding the repository (made absolute)
        """
        self._root_dir = Path(os.path.abspath(root_dir))

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def root_url(self) -> str:
        return f'file://{self._root_dir}'

    def get(self, path: str) -> bytes:
        full_path = self._full_path(path)
        try:
            return full_path.read_bytes()
        except FileNotFoundError as e:
            raise DoesNotExistError(f'Get: path does not exist: {path}') from e
        except OSError as e:
            raise ReadError(f'Get: failed to read {path}: {e}') from e

    def put(self, path: str, data: bytes) -> None:
        full_path = self._full_path(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except OSError as e:
            raise WriteError(f'Put: failed to write {path}: {e}') from e
        logger.debug('Put %d bytes at %s', len(data), path)

    def get_directory(self, repo_dir: str, local_dir: Path) -> None:
        """Recursively copy repo_dir to local_dir, merging into existing content."""
        try:
            shutil.copytree(self._full_path(repo_dir), local_dir, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise ReadError(f'Failed to copy directory from {repo_dir} to {local_dir}: {e}') from e

    def put_directory(self, local_dir: Path, repo_dir: str) -> None:
        """
        Put every file under local_dir into repo_dir, one file at a time.

        The transfer plan is computed up front. Files written before a failure
        are left in place.
        """
        try:
            transfers = plan_directory_upload(Path(local_dir), repo_dir)
        except OSError as e:
            raise WriteError(f'Failed to list files in {local_dir}: {e}') from e

        for transfer in transfers:
            try:
                data = Path(transfer.source).read_bytes()
            except OSError as e:
                raise WriteError(f'Failed to read {transfer.source}: {e}') from e
            self.put(transfer.dest, data)
        logger.debug('Put %d files from %s to %s', len(transfers), local_dir, repo_dir)

    def get_archive(self, archive_path: str, local_path: Path) -> None:
        """Extract archive_path to local_path without its top-level folder."""
        full_path = self._require_archive(archive_path)
        try:
            tarball.extract_archive(full_path, Path(local_path), self._folder_name(archive_path))
        except OSError as e:
            raise ReadError(f'Failed to extract {archive_path}: {e}') from e

    def get_archive_entry(self, archive_path: str, entry_path: str, local_path: Path) -> None:
        """Extract entry_path from archive_path to local_path/entry_path."""
        full_path = self._require_archive(archive_path)
        try:
            tarball.extract_archive_entry(full_path, entry_path, Path(local_path), self._folder_name(archive_path))
        except OSError as e:
            raise ReadError(f'Failed to extract {entry_path} from {archive_path}: {e}') from e

    def put_archive(self, local_dir: Path, archive_path: str, include_path: str | None = None) -> None:
        """
        Pack local_dir into archive_path.

        The archive's top-level folder is the archive filename without
        .tar.gz. If include_path is set, only that sub-path of local_dir is
        packed, still nested under the folder.
        """
        try:
            folder_name = tarball.archive_folder_name(archive_path)
        except ValueError as e:
            raise WriteError(f'PutArchive: {e}') from e

        full_path = self._full_path(archive_path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            tarball.pack_directory(
                Path(local_dir),
                full_path,
                folder_name,
                include_path=include_path,
                compression_level=settings.COMPRESSION_LEVEL,
            )
        except OSError as e:
            raise WriteError(f'PutArchive: failed to write {archive_path}: {e}') from e

    def delete(self, path: str) -> None:
        """Delete path; directories are removed recursively. Missing paths are ignored."""
        full_path = self._full_path(path)
        try:
            if full_path.is_dir() and not full_path.is_symlink():
                shutil.rmtree(full_path)
            else:
                full_path.unlink(missing_ok=True)
        except FileNotFoundError:
            pass  # Removed concurrently
        except OSError as e:
            raise WriteError(f'Failed to delete {self._root_dir}/{path}: {e}') from e

    def list(self, path: str) -> list[str]:
        """
        List files in path non-recursively.

        Returns paths prefixed with path, in name order, that can be passed
        straight to get(). Only entries that resolve to regular files are listed:
        directories, dangling symlinks and special files are skipped. If path
        does not exist, an empty list is returned.
        """
        try:
            with os.scandir(self._full_path(path)) as it:
                names = sorted(entry.name for entry in it if entry.is_file())
        except FileNotFoundError:
            return []
        except OSError as e:
            raise ReadError(f'Failed to list {path}: {e}') from e
        return [posixpath.join(path, name) for name in names]

    def list_archive_entries(self, archive_path: str) -> list[str]:
        full_path = self._require_archive(archive_path)
        try:
            return tarball.list_archive_entries(full_path, self._folder_name(archive_path))
        except OSError as e:
            raise ReadError(f'Failed to read {archive_path}: {e}') from e

    def list_recursive(self, folder: str) -> Iterator[ListResult]:
        return iter_checksums(self._root_dir, self._full_path(folder))

    def match_filenames_recursive(self, folder: str, filename: str) -> Iterator[ListResult]:
        return iter_filename_matches(self._root_dir, self._full_path(folder), filename)

    def _full_path(self, path: str) -> Path:
        # Logical paths are always '/'-separated
        return self._root_dir.joinpath(*[part for part in path.split('/') if part])

    def _require_archive(self, archive_path: str) -> Path:
        full_path = self._full_path(archive_path)
        try:
            exists = file_exists(full_path)
        except OSError as e:
            raise ReadError(f'Failed to stat {archive_path}: {e}') from e
        if not exists:
            raise DoesNotExistError(f'Path does not exist: {full_path}')
        return full_path

    @staticmethod
    def _folder_name(archive_path: str) -> str:
        try:
            return tarball.archive_folder_name(archive_path)
        except ValueError as e:
            raise ReadError(str(e)) from e

    def __repr__(self) -> str:
        return f'DiskRepository({self.root_url()!r})'
