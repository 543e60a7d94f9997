"""
Base configuration for artifact-repo.

Shared settings and helper functions for the library and the CLI.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings


T = TypeVar('T', bound='BaseRepositorySettings')


class BaseRepositorySettings(pydantic_settings.BaseSettings):
    """Shared configuration for repository backends."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',  # Reject unknown environment variables
    )

    # Application metadata
    APP_NAME: str = 'artifact-repo'
    VERSION: str = '0.1.0'

    # gzip level used when packing .tar.gz archives
    COMPRESSION_LEVEL: int = 9

    # Read size when streaming files through MD5
    HASH_CHUNK_SIZE: int = 1024 * 1024

    @pydantic.field_validator('COMPRESSION_LEVEL')
    @classmethod
    def validate_compression_level(cls, v: int) -> int:
        """Validate compression level is within gzip bounds."""
        if not 0 <= v <= 9:
            raise ValueError('COMPRESSION_LEVEL must be between 0-9')
        return v

    @pydantic.field_validator('HASH_CHUNK_SIZE')
    @classmethod
    def validate_hash_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('HASH_CHUNK_SIZE must be positive')
        return v


def get_settings(settings_class: type[T], env_file: str | None = None) -> T:
    """
    Build repository settings, optionally from a .env file.

    The file is env_file if given, else the path in LOAD_ENV_FILE. With
    neither, only the process environment is read.

    Raises:
        FileNotFoundError: If the chosen .env file is missing
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()  # No custom .env file, load from environment

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """Proxy that builds settings on first attribute access, so the environment is read late."""
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
