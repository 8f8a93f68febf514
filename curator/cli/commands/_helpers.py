"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from curator.core.errors import ErrorCode
from curator.output.errors import print_release_error, release_error_exit_code
from curator.services.release.publish import PublishReport, render_report

if TYPE_CHECKING:
    from curator.output.console import ConsoleProtocol
    from curator.services.release.errors import ReleaseError


def exit_with_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    print_release_error(error, console)
    raise typer.Exit(code=release_error_exit_code(error))


def exit_user_error(message: str) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def finish_publish(report: PublishReport, console: ConsoleProtocol) -> None:
    """Render the publish report; exit non-zero only if publishing was aborted."""
    render_report(report, console)
    if report.fatal is not None:
        raise typer.Exit(code=release_error_exit_code(report.fatal))
