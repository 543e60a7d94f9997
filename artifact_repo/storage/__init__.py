"""Storage backends for the artifact repository."""

from artifact_repo.storage.disk import DiskRepository
from artifact_repo.storage.factory import for_url
from artifact_repo.storage.protocol import Repository
from artifact_repo.types import ListError, ListItem, ListResult

__all__ = ['DiskRepository', 'ListError', 'ListItem', 'ListResult', 'Repository', 'for_url']
