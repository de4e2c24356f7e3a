"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and submission results.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ClientStageError
from .models.datatypes import SubmissionResult
from .telemetry.logger import shorten_body


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ClientStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_submission_result(result: SubmissionResult) -> None:
    """Print outcome, status, and a shortened response body."""

    typer.echo(f"Outcome: {result.outcome.value}")
    status = "(no response)" if result.status_code is None else str(result.status_code)
    typer.echo(f"HTTP status: {status}")
    if result.body:
        typer.echo(f"Response body: {shorten_body(result.body)}")
    if result.error:
        typer.secho(f"Error: {result.error}", fg=typer.colors.RED, err=True)
