"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from crptclient.client import DEFAULT_API_URL
from crptclient.config import ClientConfig, ConfigLoader, RuntimeConfigSources
from crptclient.http.rate_limiter import WindowUnit


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "crptclient.yml"
    config_path.write_text(
        """
api_url: " https://example.test/create "
request_limit: "5"
window_unit: minute
timeout_seconds: 2.5
verify_tls: "no"
auth_token: " token-from-file "
signature: "  "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.api_url == "https://example.test/create"
    assert config.request_limit == 5
    assert config.window_unit is WindowUnit.MINUTES
    assert config.timeout_seconds == 2.5
    assert config.verify_tls is False
    assert config.auth_token == "token-from-file"
    assert config.signature is None


def test_config_loader_from_yaml_applies_defaults_for_empty_file(tmp_path: Path) -> None:
    """An empty YAML file should yield default settings."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    config = ConfigLoader.from_yaml(config_path)

    assert config.api_url == DEFAULT_API_URL
    assert config.request_limit == 1
    assert config.window_unit is WindowUnit.SECONDS
    assert config.verify_tls is True


def test_config_loader_from_yaml_rejects_unknown_keys(tmp_path: Path) -> None:
    """Unknown keys should fail clearly."""

    config_path = tmp_path / "unknown.yml"
    config_path.write_text("request_limit: 2\nretries: 3\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"unsupported key\(s\): retries"):
        ConfigLoader.from_yaml(config_path)


@pytest.mark.parametrize(
    ("yaml_text", "message"),
    [
        ("request_limit: 0\n", "`request_limit` must be a positive integer"),
        ("request_limit: true\n", "`request_limit` must be a positive integer"),
        ("timeout_seconds: abc\n", "`timeout_seconds` must be a positive number"),
        ("window_unit: fortnight\n", "Unsupported window unit `fortnight`"),
        ("verify_tls: maybe\n", "`verify_tls` must be a boolean value"),
        ("- a\n- b\n", "top-level mapping"),
        ("request_limit: [1\n", "could not be parsed"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_values(
    tmp_path: Path, yaml_text: str, message: str
) -> None:
    """Invalid field values and non-mapping roots should fail validation."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(yaml_text, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_settings_and_runtime_credentials() -> None:
    """Environment loader should read settings and keep credential env values as sources."""

    config = ConfigLoader.from_env(
        {
            "CRPT_API_URL": "https://example.test/create",
            "CRPT_REQUEST_LIMIT": "10",
            "CRPT_WINDOW_UNIT": "hours",
            "CRPT_TIMEOUT_SECONDS": "12",
            "CRPT_AUTH_TOKEN": " env-token ",
            "CRPT_SIGNATURE": "   ",
            "UNRELATED": "ignored",
        }
    )

    assert config.api_url == "https://example.test/create"
    assert config.request_limit == 10
    assert config.window_unit is WindowUnit.HOURS
    assert config.timeout_seconds == 12.0
    assert dict(config.runtime_sources.env) == {"CRPT_AUTH_TOKEN": " env-token "}
    assert config.resolved_credentials().auth_token == "env-token"
    assert config.resolved_credentials().signature is None


def test_config_loader_from_env_rejects_invalid_limit() -> None:
    """Invalid numeric environment values should fail validation."""

    with pytest.raises(ValueError, match="`request_limit` must be a positive integer"):
        ConfigLoader.from_env({"CRPT_REQUEST_LIMIT": "-3"})


def test_resolved_credentials_follow_cli_secure_env_config_precedence() -> None:
    """Credential precedence should be cli > secure > env > config values."""

    config = ClientConfig(auth_token="config-token", signature="config-signature")

    assert config.resolved_credentials().auth_token == "config-token"

    sources = RuntimeConfigSources(
        cli={"signature": "cli-signature"},
        secure={"auth_token": "secure-token"},
        env={"CRPT_AUTH_TOKEN": "env-token", "CRPT_SIGNATURE": "env-signature"},
    )
    resolved = config.resolved_credentials(sources)

    assert resolved.auth_token == "secure-token"
    assert resolved.signature == "cli-signature"

    env_only = config.resolved_credentials(
        RuntimeConfigSources(env={"CRPT_AUTH_TOKEN": "env-token", "CRPT_SIGNATURE": " "})
    )
    assert env_only.auth_token == "env-token"
    assert env_only.signature == "config-signature"


def test_client_config_validate_rejects_blank_url() -> None:
    """Direct config construction should still validate required values."""

    with pytest.raises(ValueError, match="`api_url` must be a non-empty string"):
        ClientConfig(api_url=" ").validate()
