"""
Shared exceptions for artifact-repo.

Every repository backend reports failures through this hierarchy so callers
see the same contract regardless of where artifacts are stored.

Exception Hierarchy:
    RepositoryError (base)
    ├── DoesNotExistError (required path or archive is absent)
    ├── ReadError (reading, copying or listing existing content failed)
    ├── WriteError (creating, writing, packing or deleting failed)
    ├── ArchiveError (archive codec failure: corrupt data, missing entry)
    └── UnsupportedRepositoryError (no backend for a repository URL)
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for all artifact-repo errors."""


class DoesNotExistError(RepositoryError):
    """Raised when an operation requires a path that does not exist."""


class ReadError(RepositoryError):
    """Raised when reading, copying or traversing repository content fails."""


class WriteError(RepositoryError):
    """Raised when creating, writing, packing or deleting repository content fails."""


class ArchiveError(RepositoryError):
    """Raised when a .tar.gz archive cannot be decoded or lacks a requested entry."""


class UnsupportedRepositoryError(RepositoryError):
    """Raised when a repository URL uses a scheme with no backend."""

    def __init__(self, url: str, scheme: str) -> None:
        self.url = url
        self.scheme = scheme
        super().__init__(f"Unknown repository scheme '{scheme}' in {url}. Supported: file://")
