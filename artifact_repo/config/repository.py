"""
Repository configuration.

Extends base configuration with the default repository location.
"""

from __future__ import annotations

from artifact_repo.config.base import BaseRepositorySettings, lazy_settings


class RepositorySettings(BaseRepositorySettings):
    """Repository-specific configuration."""

    # Repository used by the CLI when --repository is not given
    REPOSITORY_URL: str = 'file://.artifacts'


# Module-level singleton (lazy-loaded)
settings = lazy_settings(RepositorySettings)
