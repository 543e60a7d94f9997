"""
Checksum walker for recursive repository listings.

Both walkers are generators: they traverse lazily as the caller iterates,
treat a missing folder as empty, and report any other failure as a single
trailing ListError instead of raising.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from artifact_repo.config.repository import settings
from artifact_repo.exceptions import ReadError
from artifact_repo.services.files import walk_files
from artifact_repo.types import ListError, ListItem, ListResult

__all__ = ['iter_checksums', 'iter_filename_matches', 'md5_file']

logger = logging.getLogger(__name__)


def md5_file(path: Path, chunk_size: int | None = None) -> bytes:
    """Stream a file through MD5 and return the 16-byte digest."""
    chunk_size = chunk_size or settings.HASH_CHUNK_SIZE
    h = hashlib.md5()
    with open(path, 'rb') as f:
        while chunk := f.read(chunk_size):
            h.update(chunk)
    return h.digest()


def iter_checksums(root: Path, folder: Path) -> Iterator[ListResult]:
    """
    Yield a ListItem with an MD5 digest for every regular file under folder.

    Args:
        root: Repository root that result paths are made relative to
        folder: Absolute folder to walk
    """
    return _walk_results(
        folder,
        lambda path: ListItem(path=path.relative_to(root).as_posix(), md5=md5_file(path)),
    )


def iter_filename_matches(root: Path, folder: Path, filename: str) -> Iterator[ListResult]:
    """Yield a path-only ListItem for every regular file under folder named filename."""
    return _walk_results(
        folder,
        lambda path: ListItem(path=path.relative_to(root).as_posix()) if path.name == filename else None,
    )


def _walk_results(folder: Path, to_item: Callable[[Path], ListItem | None]) -> Iterator[ListResult]:
    try:
        for path in walk_files(folder):
            item = to_item(path)
            if item is not None:
                yield item
    except FileNotFoundError as e:
        # A missing folder reads as an empty repository area, the same as
        # object stores that have no real directories
        if e.filename is not None and Path(e.filename) != folder:
            yield ListError(ReadError(str(e)))
            return
        logger.debug('Recursive listing of missing folder %s', folder)
    except OSError as e:
        yield ListError(ReadError(str(e)))
