"""CLI credential resolution helpers.

This module isolates token prompting, runtime source assembly, and secure
token persistence from the command wiring layer.
"""

from __future__ import annotations

from typing import Callable, Protocol

import typer

from .credentials import create_credential_store
from .errors import ClientStageError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for secure credential store operations used by CLI resolution."""

    def get_auth_token(self) -> str | None:
        """Return currently stored auth token, if available."""

    def set_auth_token(self, auth_token: str) -> None:
        """Persist auth token value in secure storage."""


def _set_runtime_cli_value(
    runtime_cli_values: dict[str, str],
    key: str,
    value: str | None,
) -> None:
    """Set a normalized runtime CLI value when user input is present."""

    normalized = normalize_optional_string(value)
    if normalized is not None:
        runtime_cli_values[key] = normalized


def resolve_credential_sources(
    auth_token: str | None,
    signature: str | None,
    prompt_token: bool,
    store_token: bool,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> tuple[dict[str, str], dict[str, str]]:
    """Resolve CLI and secure runtime source mappings for submission credentials."""

    runtime_cli_values: dict[str, str] = {}
    _set_runtime_cli_value(runtime_cli_values, "auth_token", auth_token)
    _set_runtime_cli_value(runtime_cli_values, "signature", signature)

    token_entered_in_run = "auth_token" in runtime_cli_values
    if prompt_token and not token_entered_in_run:
        prompted_token = normalize_optional_string(
            typer.prompt(
                "Auth token (hidden; leave blank to skip)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_token is not None:
            runtime_cli_values["auth_token"] = prompted_token
            token_entered_in_run = True

    credential_store = credential_store_factory()
    runtime_secure_values: dict[str, str] = {}
    stored_token = credential_store.get_auth_token()
    if stored_token is not None:
        runtime_secure_values["auth_token"] = stored_token

    if token_entered_in_run and store_token:
        try:
            credential_store.set_auth_token(runtime_cli_values["auth_token"])
            typer.echo("Stored auth token in secure credential storage.")
        except Exception as exc:
            raise ClientStageError(
                stage="credentials",
                detail=f"Failed to store auth token securely: {exc}",
                hint=(
                    "Configure a keyring backend, or rerun with "
                    "`--no-store-token` for one-off usage."
                ),
            ) from exc

    return runtime_cli_values, runtime_secure_values
