"""
Repository selection by URL.

Picks the backend for a repository URL from its scheme. Only the local disk
backend exists; other schemes are rejected rather than silently treated as
paths.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from artifact_repo.exceptions import UnsupportedRepositoryError
from artifact_repo.storage.disk import DiskRepository
from artifact_repo.storage.protocol import Repository

__all__ = ['for_url']

logger = logging.getLogger(__name__)


def for_url(url: str) -> Repository:
    """
    Create the repository backend for url.

    Args:
        url: 'file://<path>' or a plain filesystem path

    Returns:
        Repository rooted at the URL's location

    Raises:
        UnsupportedRepositoryError: If the scheme has no backend (e.g. s3://)

    Examples:
        >>> for_url('file:///var/artifacts').root_url()
        'file:///var/artifacts'
    """
    parsed = urlparse(url)
    # Single letters are Windows drive letters, not schemes
    if parsed.scheme == '' or len(parsed.scheme) == 1:
        return DiskRepository(url)
    if parsed.scheme == 'file':
        # file://relative/dir parses 'relative' as the host
        path = parsed.netloc + parsed.path
        logger.debug('Using disk repository at %s', path)
        return DiskRepository(path)
    raise UnsupportedRepositoryError(url, parsed.scheme)
