"""
CLI logging adapter - routes library log records to the terminal.

Library modules log through the standard logging module; this handler
prints those records for command-line usage.
"""

from __future__ import annotations

import logging

import typer


class CLILogHandler(logging.Handler):
    """
    Logging handler for the CLI.

    Prints '[LEVEL] message' to stderr. Errors are shown in red.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = f'[{record.levelname}] {self.format(record)}'
            if record.levelno >= logging.ERROR:
                typer.secho(message, fg=typer.colors.RED, err=True)
            else:
                typer.echo(message, err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> None:
    """
    Attach a CLILogHandler to the package logger.

    Args:
        verbose: If True, show debug messages. If False, only warnings/errors.
    """
    package_logger = logging.getLogger('artifact_repo')
    for handler in list(package_logger.handlers):
        if isinstance(handler, CLILogHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(CLILogHandler())
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
