"""
Shared type definitions for artifact-repo.

Recursive listings yield ListItem values and end with at most one ListError.
A ListError is always the final element.
"""

from __future__ import annotations

import attrs

from artifact_repo.exceptions import RepositoryError


@attrs.define(frozen=True)
class ListItem:
    """A file found by a recursive listing."""

    path: str  # Logical path relative to the repository root
    md5: bytes | None = None  # 16-byte digest; None for filename-match results

    @property
    def md5_hex(self) -> str | None:
        return self.md5.hex() if self.md5 is not None else None


@attrs.define(frozen=True)
class ListError:
    """Terminal failure of a recursive listing."""

    error: RepositoryError


ListResult = ListItem | ListError
