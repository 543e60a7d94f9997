"""Tests for choosing a repository backend from a URL."""

from __future__ import annotations

from pathlib import Path

import pytest

from artifact_repo.exceptions import UnsupportedRepositoryError
from artifact_repo.storage import DiskRepository, for_url


def test_file_url_gives_disk_repository(tmp_path: Path) -> None:
    repo = for_url(f'file://{tmp_path}')
    assert isinstance(repo, DiskRepository)
    assert repo.root_url() == f'file://{tmp_path}'


def test_relative_file_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    repo = for_url('file://.artifacts')
    assert repo.root_url() == f'file://{tmp_path}/.artifacts'


def test_plain_path_gives_disk_repository(tmp_path: Path) -> None:
    repo = for_url(str(tmp_path / 'store'))
    assert isinstance(repo, DiskRepository)
    assert repo.root_url() == f'file://{tmp_path}/store'


@pytest.mark.parametrize('url', ['s3://bucket/root', 'gs://bucket', 'ftp://host/dir'])
def test_unknown_scheme_raises(url: str) -> None:
    with pytest.raises(UnsupportedRepositoryError) as exc_info:
        for_url(url)
    assert exc_info.value.scheme == url.split(':')[0]
