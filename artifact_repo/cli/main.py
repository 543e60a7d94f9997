#!/usr/bin/env python3
"""
Command-line interface for artifact-repo.

Provides commands to inspect and modify a repository: read and write files,
copy whole directories, and pack or unpack .tar.gz archives.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

import typer

from artifact_repo.cli.logger import configure_logging
from artifact_repo.config.repository import settings
from artifact_repo.exceptions import RepositoryError
from artifact_repo.storage import ListError, Repository, for_url

app = typer.Typer(
    name='artifact-repo',
    help='Store and retrieve artifacts in a repository',
    add_completion=False,
)

logger = logging.getLogger(__name__)


@app.callback()
def main_callback(
    ctx: typer.Context,
    repository: str | None = typer.Option(
        None, '--repository', '-r', help='Repository URL (default: REPOSITORY_URL setting)'
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    configure_logging(verbose)
    url = repository or settings.REPOSITORY_URL
    with _handle_errors():
        ctx.obj = for_url(url)


@app.command()
def root(ctx: typer.Context) -> None:
    """Print the repository root URL."""
    typer.echo(_repo(ctx).root_url())


@app.command('ls')
def list_files(ctx: typer.Context, path: str = typer.Argument('', help='Folder to list')) -> None:
    """List files directly under PATH (directories are not shown)."""
    with _handle_errors():
        for item in _repo(ctx).list(path):
            typer.echo(item)


@app.command('ls-recursive')
def list_recursive(
    ctx: typer.Context,
    folder: str = typer.Argument('', help='Folder to walk'),
    name: str | None = typer.Option(None, '--name', '-n', help='Only show files with this base name'),
) -> None:
    """List every file under FOLDER with its MD5 checksum."""
    repo = _repo(ctx)
    results = repo.match_filenames_recursive(folder, name) if name else repo.list_recursive(folder)
    for result in results:
        if isinstance(result, ListError):
            typer.secho(f'Error: {result.error}', fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        if result.md5 is None:
            typer.echo(result.path)
        else:
            typer.echo(f'{result.md5_hex}  {result.path}')


@app.command()
def get(
    ctx: typer.Context,
    path: str = typer.Argument(..., help='File to read'),
    output: Path | None = typer.Option(None, '--output', '-o', help='Write to this file instead of stdout'),
) -> None:
    """Read a file from the repository."""
    with _handle_errors():
        data = _repo(ctx).get(path)
    if output is None:
        typer.echo(data, nl=False)
    else:
        try:
            output.write_bytes(data)
        except OSError as e:
            typer.secho(f'Error: failed to write {output}: {e}', fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        logger.info('Wrote %d bytes to %s', len(data), output)


@app.command()
def put(
    ctx: typer.Context,
    local_file: Path = typer.Argument(..., help='Local file to upload', exists=True, dir_okay=False),
    path: str = typer.Argument(..., help='Destination path in the repository'),
) -> None:
    """Write a local file into the repository."""
    with _handle_errors():
        _repo(ctx).put(path, local_file.read_bytes())


@app.command('rm')
def delete(ctx: typer.Context, path: str = typer.Argument(..., help='File or folder to delete')) -> None:
    """Delete a file or folder (recursively). Missing paths are ignored."""
    with _handle_errors():
        _repo(ctx).delete(path)


@app.command('push-dir')
def push_directory(
    ctx: typer.Context,
    local_dir: Path = typer.Argument(..., help='Local directory to upload', file_okay=False),
    repo_dir: str = typer.Argument(..., help='Destination folder in the repository'),
) -> None:
    """Upload every file of LOCAL_DIR into REPO_DIR."""
    with _handle_errors():
        _repo(ctx).put_directory(local_dir, repo_dir)


@app.command('pull-dir')
def pull_directory(
    ctx: typer.Context,
    repo_dir: str = typer.Argument(..., help='Folder in the repository'),
    local_dir: Path = typer.Argument(..., help='Local destination directory', file_okay=False),
) -> None:
    """Copy REPO_DIR out of the repository into LOCAL_DIR."""
    with _handle_errors():
        _repo(ctx).get_directory(repo_dir, local_dir)


@app.command()
def pack(
    ctx: typer.Context,
    local_dir: Path = typer.Argument(..., help='Local directory to pack', file_okay=False),
    archive: str = typer.Argument(..., help='Archive path in the repository (must end with .tar.gz)'),
    include: str | None = typer.Option(None, '--include', '-i', help='Only pack this sub-path of LOCAL_DIR'),
) -> None:
    """Pack LOCAL_DIR into a .tar.gz archive in the repository."""
    with _handle_errors():
        _repo(ctx).put_archive(local_dir, archive, include_path=include)


@app.command()
def unpack(
    ctx: typer.Context,
    archive: str = typer.Argument(..., help='Archive path in the repository'),
    local_dir: Path = typer.Argument(..., help='Local destination directory', file_okay=False),
    entry: str | None = typer.Option(None, '--entry', '-e', help='Only extract this entry'),
) -> None:
    """Extract a .tar.gz archive from the repository into LOCAL_DIR."""
    repo = _repo(ctx)
    with _handle_errors():
        if entry is None:
            repo.get_archive(archive, local_dir)
        else:
            repo.get_archive_entry(archive, entry, local_dir)


@app.command('ls-archive')
def list_archive(ctx: typer.Context, archive: str = typer.Argument(..., help='Archive path in the repository')) -> None:
    """List the entries of a .tar.gz archive."""
    with _handle_errors():
        for entry in _repo(ctx).list_archive_entries(archive):
            typer.echo(entry)


def _repo(ctx: typer.Context) -> Repository:
    return ctx.obj


@contextlib.contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except RepositoryError as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
