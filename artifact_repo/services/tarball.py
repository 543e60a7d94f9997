"""
Packing and unpacking of .tar.gz archives.

Every archive holds a single top-level folder named after the archive file
with its .tar.gz suffix removed: packing `run.tar.gz` writes members as
`run/<relative path>`. That folder is stripped again on every extract and
listing, so callers never see it.

Only regular files are stored. Codec failures surface as ArchiveError; local
write failures during extraction as WriteError. Other OS errors propagate
for the caller to classify.
"""

from __future__ import annotations

import contextlib
import gzip
import logging
import posixpath
import shutil
import tarfile
import zlib
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from artifact_repo.exceptions import ArchiveError, WriteError
from artifact_repo.services.files import walk_files

__all__ = [
    'ARCHIVE_SUFFIX',
    'archive_folder_name',
    'extract_archive',
    'extract_archive_entry',
    'list_archive_entries',
    'pack_directory',
]

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = '.tar.gz'

# gzip.BadGzipFile is an OSError, so it must be matched before plain OSError
_CODEC_ERRORS = (tarfile.TarError, gzip.BadGzipFile, EOFError, zlib.error)


def archive_folder_name(archive_path: str) -> str:
    """
    Derive the archive's internal top-level folder name.

    Exactly one trailing .tar.gz is removed from the base filename.

    Raises:
        ValueError: If the name lacks the suffix or has nothing before it

    Examples:
        >>> archive_folder_name('checkpoints/abc123.tar.gz')
        'abc123'

        >>> archive_folder_name('x.tar.gz.tar.gz')
        'x.tar.gz'
    """
    base = posixpath.basename(archive_path)
    if not base.endswith(ARCHIVE_SUFFIX):
        raise ValueError(f'Archive path must end with {ARCHIVE_SUFFIX}: {archive_path}')
    folder = base[: -len(ARCHIVE_SUFFIX)]
    if not folder:
        raise ValueError(f'Archive path has no name before {ARCHIVE_SUFFIX}: {archive_path}')
    return folder


def pack_directory(
    local_dir: Path,
    dest: Path,
    folder_name: str,
    include_path: str | None = None,
    compression_level: int = 9,
) -> int:
    """
    Write the regular files of local_dir to a new .tar.gz at dest.

    Args:
        local_dir: Directory whose files are archived
        dest: Archive file to create (overwritten if present)
        folder_name: Top-level folder every member is nested under
        include_path: If set, only this sub-path of local_dir is archived,
            still named relative to local_dir
        compression_level: gzip level 0-9

    Returns:
        Number of files written

    Raises:
        OSError: If walking local_dir, writing, or the final close fails
    """
    source = local_dir / include_path if include_path else local_dir
    count = 0
    # Closing the file is part of the write: a failed flush must propagate
    with open(dest, 'wb') as f:
        with tarfile.open(fileobj=f, mode='w:gz', compresslevel=compression_level) as tf:
            for path in walk_files(source):
                arcname = posixpath.join(folder_name, path.relative_to(local_dir).as_posix())
                tf.add(path, arcname=arcname, recursive=False)
                count += 1
    logger.debug('Packed %d files from %s into %s', count, source, dest)
    return count


def list_archive_entries(archive: Path, folder_name: str) -> list[str]:
    """Return member names in archive order with the top-level folder stripped."""
    with _open_archive(archive) as tf:
        return [_strip_folder(member.name, folder_name) for member in tf]


def extract_archive(archive: Path, dest: Path, folder_name: str) -> int:
    """
    Extract every member of archive directly under dest.

    Returns:
        Number of files extracted
    """
    count = 0
    with _open_archive(archive) as tf:
        for member in tf:
            if member.name == folder_name:
                continue
            count += _extract_member(tf, member, dest, _strip_folder(member.name, folder_name))
    logger.debug('Extracted %d files from %s to %s', count, archive, dest)
    return count


def extract_archive_entry(archive: Path, entry_path: str, dest: Path, folder_name: str) -> int:
    """
    Extract one entry of archive to dest/<entry_path>.

    If entry_path names a directory inside the archive, every member beneath
    it is extracted.

    Returns:
        Number of files extracted

    Raises:
        ArchiveError: If the archive has no such entry
    """
    wanted = posixpath.normpath(entry_path).strip('/')
    found = False
    count = 0
    with _open_archive(archive) as tf:
        for member in tf:
            name = _strip_folder(member.name, folder_name)
            if name == wanted or name.startswith(wanted + '/'):
                found = True
                count += _extract_member(tf, member, dest, name)
    if not found:
        raise ArchiveError(f'Entry {entry_path} not found in archive {archive}')
    return count


@contextlib.contextmanager
def _open_archive(archive: Path) -> Iterator[tarfile.TarFile]:
    try:
        with tarfile.open(archive, mode='r:gz') as tf:
            yield tf
    except _CODEC_ERRORS as e:
        raise ArchiveError(f'Failed to read archive {archive}: {e}') from e


def _strip_folder(name: str, folder_name: str) -> str:
    prefix = folder_name + '/'
    return name[len(prefix) :] if name.startswith(prefix) else name


def _extract_member(tf: tarfile.TarFile, member: tarfile.TarInfo, dest: Path, name: str) -> int:
    """Write one member under dest. Returns 1 for a file, 0 otherwise."""
    parts = PurePosixPath(name).parts
    if not parts or PurePosixPath(name).is_absolute() or '..' in parts:
        raise ArchiveError(f'Archive entry escapes destination: {member.name}')
    target = dest.joinpath(*parts)

    if not (member.isfile() or member.isdir()):
        logger.debug('Skipping non-regular archive member %s', member.name)
        return 0

    try:
        if member.isdir():
            target.mkdir(parents=True, exist_ok=True)
            return 0
        src = tf.extractfile(member)
        if src is None:
            return 0
        target.parent.mkdir(parents=True, exist_ok=True)
        with contextlib.closing(src), open(target, 'wb') as out_f:
            shutil.copyfileobj(src, out_f)
        if member.mode:
            target.chmod(member.mode & 0o777)
    except _CODEC_ERRORS as e:
        raise ArchiveError(f'Failed to read {member.name} from archive: {e}') from e
    except OSError as e:
        raise WriteError(f'Failed to extract {member.name} to {target}: {e}') from e
    return 1
