"""Command-line interface for crptclient.

Responsibilities:
- Expose user-facing commands for document submission and credentials.
- Convert CLI arguments into `ClientConfig` and run one submission.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_submission_result, exit_with_command_error
from .cli_runtime import resolve_credential_sources
from .client import DocumentClient
from .config import ClientConfig, ConfigLoader, RuntimeConfigSources
from .credentials import create_credential_store
from .errors import ClientStageError
from .http.rate_limiter import WindowUnit
from .models.codec import decode_document
from .models.datatypes import Document, SubmissionResult
from .parsing import normalize_optional_string
from .telemetry.logger import SubmissionLogger

app = typer.Typer(
    name="crptclient",
    no_args_is_help=True,
    help="Rate-limited document registration client.",
)


def _load_config(config_path: Path | None) -> ClientConfig:
    """Load YAML config when requested, otherwise environment config, as stage errors."""

    if config_path is None:
        try:
            return ConfigLoader.from_env(os.environ)
        except ValueError as exc:
            raise ClientStageError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix `CRPT_*` environment variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise ClientStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ClientStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _apply_overrides(
    base_config: ClientConfig,
    api_url: str | None,
    request_limit: int | None,
    window_unit: str | None,
    runtime_sources: RuntimeConfigSources,
) -> ClientConfig:
    """Apply explicit CLI overrides on top of loaded config values."""

    try:
        resolved_window_unit = (
            WindowUnit.parse(window_unit) if window_unit is not None else base_config.window_unit
        )
        config = replace(
            base_config,
            api_url=normalize_optional_string(api_url) or base_config.api_url,
            request_limit=request_limit if request_limit is not None else base_config.request_limit,
            window_unit=resolved_window_unit,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_sources.cli,
                secure=runtime_sources.secure,
                env=os.environ,
            ),
        )
        config.validate()
    except ValueError as exc:
        raise ClientStageError(
            stage="config",
            detail=f"Invalid option value: {exc}",
            hint="Check `--api-url`, `--request-limit`, and `--window-unit`.",
        ) from exc
    return config


def _load_document(document_path: Path) -> Document:
    """Read and decode a document JSON file."""

    try:
        raw_json = document_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ClientStageError(
            stage="document",
            detail=f"Document file not found: `{document_path}`.",
            hint="Pass an existing document JSON file.",
        ) from exc
    try:
        return decode_document(raw_json)
    except ValueError as exc:
        raise ClientStageError(
            stage="document",
            detail=f"Invalid document file `{document_path}`: {exc}",
            hint="Fix the document JSON and rerun.",
        ) from exc


def _require_credentials(config: ClientConfig) -> tuple[str, str]:
    """Return `(signature, auth_token)` or fail with an actionable stage error."""

    credentials = config.resolved_credentials()
    if credentials.auth_token is None:
        raise ClientStageError(
            stage="credentials",
            detail="No auth token resolved.",
            hint=(
                "Pass `--token`, use `--prompt-token`, set `CRPT_AUTH_TOKEN`, "
                "or store one via `crptclient credentials --set-token`."
            ),
        )
    if credentials.signature is None:
        raise ClientStageError(
            stage="credentials",
            detail="No document signature resolved.",
            hint="Pass `--signature`, `--signature-file`, or set `CRPT_SIGNATURE`.",
        )
    return credentials.signature, credentials.auth_token


@app.command("submit")
def submit_command(
    document_path: Annotated[Path, typer.Argument(help="Path to document JSON file.")],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with client settings."),
    ] = None,
    api_url: Annotated[
        str | None, typer.Option("--api-url", help="Registration endpoint URL override.")
    ] = None,
    request_limit: Annotated[
        int | None,
        typer.Option("--request-limit", help="Requests admitted per window override."),
    ] = None,
    window_unit: Annotated[
        str | None,
        typer.Option(
            "--window-unit",
            help="Window length: `millisecond`, `second`, `minute`, `hour`, or `day`.",
        ),
    ] = None,
    signature: Annotated[
        str | None, typer.Option("--signature", help="Document signature value.")
    ] = None,
    signature_file: Annotated[
        Path | None,
        typer.Option("--signature-file", help="Read the document signature from a file."),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            help="Auth token override. Prefer `--prompt-token` to avoid shell history.",
        ),
    ] = None,
    prompt_token: Annotated[
        bool,
        typer.Option("--prompt-token", help="Prompt for auth token with hidden input."),
    ] = False,
    store_token: Annotated[
        bool,
        typer.Option(
            "--store-token/--no-store-token",
            help="Persist CLI-entered auth token to secure credential storage.",
        ),
    ] = True,
) -> None:
    """Submit one document to the registration API."""

    try:
        if signature_file is not None:
            try:
                signature = signature_file.read_text(encoding="utf-8")
            except OSError as exc:
                raise ClientStageError(
                    stage="credentials",
                    detail=f"Could not read signature file `{signature_file}`: {exc}",
                    hint="Pass a readable `--signature-file` path.",
                ) from exc
        runtime_cli_values, runtime_secure_values = resolve_credential_sources(
            auth_token=token,
            signature=signature,
            prompt_token=prompt_token,
            store_token=store_token,
            credential_store_factory=create_credential_store,
        )
        config = _apply_overrides(
            base_config=_load_config(config_file),
            api_url=api_url,
            request_limit=request_limit,
            window_unit=window_unit,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
            ),
        )
        document = _load_document(document_path)
        resolved_signature, resolved_token = _require_credentials(config)
        result = _submit_once(config, document, resolved_signature, resolved_token)
    except Exception as exc:
        exit_with_command_error("submit", exc)

    echo_submission_result(result)
    if not result.ok:
        raise typer.Exit(code=1)


def _submit_once(
    config: ClientConfig,
    document: Document,
    signature: str,
    auth_token: str,
) -> SubmissionResult:
    """Run one submission with a short-lived client."""

    with DocumentClient.from_config(config, logger=SubmissionLogger()) as client:
        return client.submit(document, signature, auth_token)


@app.command("credentials")
def credentials_command(
    set_token: Annotated[
        bool,
        typer.Option("--set-token", help="Prompt and store auth token securely."),
    ] = False,
    clear_token: Annotated[
        bool,
        typer.Option("--clear-token", help="Remove stored auth token from secure storage."),
    ] = False,
) -> None:
    """Manage the stored auth token."""

    if set_token and clear_token:
        exit_with_command_error(
            "credentials",
            ClientStageError(
                stage="credentials",
                detail="`--set-token` and `--clear-token` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_token:
        prompted_token = normalize_optional_string(
            typer.prompt(
                "Auth token (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_token is None:
            exit_with_command_error(
                "credentials",
                ClientStageError(
                    stage="credentials",
                    detail="No auth token entered.",
                    hint="Provide a non-empty token when using `--set-token`.",
                ),
            )
        try:
            credential_store.set_auth_token(prompted_token)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                ClientStageError(
                    stage="credentials",
                    detail=f"Failed to store auth token securely: {exc}",
                    hint="Configure a keyring backend and retry.",
                ),
            )
        typer.echo("Auth token stored in secure credential storage.")
        return

    if clear_token:
        removed = credential_store.clear_auth_token()
        if removed:
            typer.echo("Stored auth token cleared from secure credential storage.")
        else:
            typer.echo("No stored auth token found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    status = "present" if credential_store.get_auth_token() is not None else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored auth token: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
