"""
Tests for .tar.gz packing, extraction and listing.

Covers the internal folder naming convention on its own (no I/O) and through
DiskRepository archive operations.
"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from artifact_repo.exceptions import ArchiveError, DoesNotExistError, ReadError, WriteError
from artifact_repo.services import tarball
from artifact_repo.services.tarball import archive_folder_name
from artifact_repo.storage import DiskRepository

FILES = {
    'model.pt': b'weights' * 100,
    'metrics/loss.json': b'{"loss": 0.1}',
    'metrics/acc.json': b'{"acc": 0.9}',
    'src/train.py': b'print("train")\n',
}


@pytest.fixture
def repo(tmp_path: Path) -> DiskRepository:
    return DiskRepository(tmp_path / 'repo')


@pytest.fixture
def source(tmp_path: Path) -> Path:
    base = tmp_path / 'source'
    for rel, data in FILES.items():
        path = base / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return base


def read_tree(base: Path) -> dict[str, bytes]:
    return {p.relative_to(base).as_posix(): p.read_bytes() for p in base.rglob('*') if p.is_file()}


# ==============================================================================
# Folder name derivation
# ==============================================================================


@pytest.mark.parametrize(
    ('archive_path', 'expected'),
    [
        ('run.tar.gz', 'run'),
        ('checkpoints/abc123.tar.gz', 'abc123'),
        ('a/b/c/my.model.tar.gz', 'my.model'),
        ('x.tar.gz.tar.gz', 'x.tar.gz'),
    ],
)
def test_archive_folder_name(archive_path: str, expected: str) -> None:
    assert archive_folder_name(archive_path) == expected


@pytest.mark.parametrize('archive_path', ['bad.zip', 'run.tar', 'run.tgz', 'dir/.tar.gz', 'run.tar.gz/'])
def test_archive_folder_name_rejects_invalid_names(archive_path: str) -> None:
    with pytest.raises(ValueError):
        archive_folder_name(archive_path)


# ==============================================================================
# Packing
# ==============================================================================


def test_put_archive_nests_members_under_folder_name(repo: DiskRepository, source: Path) -> None:
    repo.put_archive(source, 'checkpoints/run1.tar.gz')

    with tarfile.open(repo.root_dir / 'checkpoints' / 'run1.tar.gz', 'r:gz') as tf:
        names = tf.getnames()

    assert sorted(names) == sorted(f'run1/{rel}' for rel in FILES)


def test_put_archive_rejects_bad_suffix_without_creating_files(repo: DiskRepository, source: Path) -> None:
    with pytest.raises(WriteError, match='.tar.gz'):
        repo.put_archive(source, 'out/bad.zip')

    assert not repo.root_dir.exists()


def test_put_archive_include_path_only_packs_sub_path(repo: DiskRepository, source: Path) -> None:
    repo.put_archive(source, 'partial.tar.gz', include_path='metrics')
    assert repo.list_archive_entries('partial.tar.gz') == ['metrics/acc.json', 'metrics/loss.json']


def test_put_archive_include_single_file(repo: DiskRepository, source: Path) -> None:
    repo.put_archive(source, 'one.tar.gz', include_path='model.pt')
    assert repo.list_archive_entries('one.tar.gz') == ['model.pt']


def test_put_archive_missing_source_raises_write_error(repo: DiskRepository, tmp_path: Path) -> None:
    with pytest.raises(WriteError):
        repo.put_archive(tmp_path / 'missing', 'a.tar.gz')


def test_put_archive_close_failure_raises_write_error(
    repo: DiskRepository, source: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    class FailingClose(io.BytesIO):
        def close(self) -> None:
            if not self.closed:
                super().close()
                raise OSError('No space left on device')

    monkeypatch.setattr(tarball, 'open', lambda *args, **kwargs: FailingClose(), raising=False)

    with pytest.raises(WriteError, match='No space left'):
        repo.put_archive(source, 'a.tar.gz')


# ==============================================================================
# Extraction
# ==============================================================================


def test_put_archive_then_get_archive_round_trip(repo: DiskRepository, source: Path, tmp_path: Path) -> None:
    repo.put_archive(source, 'exp/run1.tar.gz')
    dest = tmp_path / 'restored'

    repo.get_archive('exp/run1.tar.gz', dest)

    assert read_tree(dest) == FILES
    assert not (dest / 'run1').exists()


def test_get_archive_missing_raises_does_not_exist(repo: DiskRepository, tmp_path: Path) -> None:
    with pytest.raises(DoesNotExistError):
        repo.get_archive('missing.tar.gz', tmp_path / 'out')


def test_get_archive_entry_extracts_single_file(repo: DiskRepository, source: Path, tmp_path: Path) -> None:
    repo.put_archive(source, 'run.tar.gz')
    dest = tmp_path / 'restored'

    repo.get_archive_entry('run.tar.gz', 'metrics/loss.json', dest)

    assert read_tree(dest) == {'metrics/loss.json': FILES['metrics/loss.json']}


def test_get_archive_entry_extracts_directory(repo: DiskRepository, source: Path, tmp_path: Path) -> None:
    repo.put_archive(source, 'run.tar.gz')
    dest = tmp_path / 'restored'

    repo.get_archive_entry('run.tar.gz', 'metrics', dest)

    assert set(read_tree(dest)) == {'metrics/loss.json', 'metrics/acc.json'}


def test_get_archive_entry_missing_archive_raises_does_not_exist(repo: DiskRepository, tmp_path: Path) -> None:
    with pytest.raises(DoesNotExistError):
        repo.get_archive_entry('missing.tar.gz', 'model.pt', tmp_path / 'out')


def test_get_archive_entry_missing_entry_is_archive_error(repo: DiskRepository, source: Path, tmp_path: Path) -> None:
    repo.put_archive(source, 'run.tar.gz')
    with pytest.raises(ArchiveError, match='not found'):
        repo.get_archive_entry('run.tar.gz', 'nope.txt', tmp_path / 'out')


def test_get_archive_rejects_entries_escaping_destination(repo: DiskRepository, tmp_path: Path) -> None:
    archive = repo.root_dir / 'evil.tar.gz'
    archive.parent.mkdir(parents=True)
    payload = b'escaped'
    with tarfile.open(archive, 'w:gz') as tf:
        info = tarfile.TarInfo('evil/../../escaped.txt')
        info.size = len(payload)
        tf.addfile(info, io.BytesIO(payload))

    with pytest.raises(ArchiveError, match='escapes destination'):
        repo.get_archive('evil.tar.gz', tmp_path / 'out' / 'inner')

    assert not (tmp_path / 'out' / 'escaped.txt').exists()


def test_get_archive_with_bad_suffix_raises_read_error(repo: DiskRepository, tmp_path: Path) -> None:
    repo.put('archive.zip', b'data')
    with pytest.raises(ReadError):
        repo.get_archive('archive.zip', tmp_path / 'out')


# ==============================================================================
# Listing
# ==============================================================================


def test_list_archive_entries_strips_folder_name(repo: DiskRepository, source: Path) -> None:
    repo.put_archive(source, 'a/b/run7.tar.gz')

    entries = repo.list_archive_entries('a/b/run7.tar.gz')

    # Archive order follows the lexical depth-first walk of the source
    assert entries == ['metrics/acc.json', 'metrics/loss.json', 'model.pt', 'src/train.py']


def test_list_archive_entries_missing_raises_does_not_exist(repo: DiskRepository) -> None:
    with pytest.raises(DoesNotExistError):
        repo.list_archive_entries('missing.tar.gz')


def test_list_archive_entries_corrupt_archive_raises_archive_error(repo: DiskRepository) -> None:
    repo.put('corrupt.tar.gz', b'this is not gzip data')
    with pytest.raises(ArchiveError):
        repo.list_archive_entries('corrupt.tar.gz')


def test_put_archive_from_symlinked_directory(repo: DiskRepository, source: Path, tmp_path: Path) -> None:
    link = tmp_path / 'link'
    link.symlink_to(source, target_is_directory=True)

    repo.put_archive(link, 'linked.tar.gz')

    assert repo.list_archive_entries('linked.tar.gz') == [
        'metrics/acc.json',
        'metrics/loss.json',
        'model.pt',
        'src/train.py',
    ]
