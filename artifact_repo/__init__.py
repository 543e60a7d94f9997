"""Artifact repository with a local-filesystem backend."""

from artifact_repo.exceptions import (
    ArchiveError,
    DoesNotExistError,
    ReadError,
    RepositoryError,
    UnsupportedRepositoryError,
    WriteError,
)
from artifact_repo.storage import DiskRepository, ListError, ListItem, ListResult, Repository, for_url

__all__ = [
    'ArchiveError',
    'DiskRepository',
    'DoesNotExistError',
    'ListError',
    'ListItem',
    'ListResult',
    'ReadError',
    'Repository',
    'RepositoryError',
    'UnsupportedRepositoryError',
    'WriteError',
    'for_url',
]
