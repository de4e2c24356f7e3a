"""CLI tests for the `credentials` command."""

from __future__ import annotations

from typer.testing import CliRunner

from crptclient.cli import app


def test_credentials_command_reports_status(credential_store) -> None:  # type: ignore[no-untyped-def]
    """Without flags the command should print storage availability and token status."""

    runner = CliRunner()

    empty = runner.invoke(app, ["credentials"])
    credential_store.auth_token = "stored"
    present = runner.invoke(app, ["credentials"])

    assert empty.exit_code == 0
    assert "Secure credential storage: available" in empty.output
    assert "Stored auth token: not set" in empty.output
    assert "Stored auth token: present" in present.output


def test_credentials_command_sets_and_clears_token(credential_store) -> None:  # type: ignore[no-untyped-def]
    """Set should store the prompted token; clear should remove it."""

    runner = CliRunner()

    stored = runner.invoke(app, ["credentials", "--set-token"], input="secret-token\n")
    assert stored.exit_code == 0, stored.output
    assert "Auth token stored in secure credential storage." in stored.output
    assert "secret-token" not in stored.output
    assert credential_store.auth_token == "secret-token"

    cleared = runner.invoke(app, ["credentials", "--clear-token"])
    assert "Stored auth token cleared" in cleared.output
    assert credential_store.auth_token is None

    cleared_again = runner.invoke(app, ["credentials", "--clear-token"])
    assert "No stored auth token found" in cleared_again.output


def test_credentials_command_rejects_conflicting_flags(credential_store) -> None:  # type: ignore[no-untyped-def]
    """Set and clear in one invocation should fail with a stage diagnostic."""

    runner = CliRunner()

    result = runner.invoke(app, ["credentials", "--set-token", "--clear-token"])

    assert result.exit_code == 1
    assert "credentials failed at stage `credentials`" in result.output
    assert credential_store.auth_token is None


def test_credentials_command_rejects_blank_prompted_token(credential_store) -> None:  # type: ignore[no-untyped-def]
    """An empty prompt answer should fail without storing anything."""

    runner = CliRunner()

    result = runner.invoke(app, ["credentials", "--set-token"], input="\n")

    assert result.exit_code == 1
    assert "No auth token entered." in result.output
    assert credential_store.auth_token is None
