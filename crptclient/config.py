"""Configuration model and loaders for crptclient.

Responsibilities:
- Define client configuration as a typed dataclass.
- Provide deterministic precedence resolution for credentials.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `ClientConfig`: normalized settings for one `DocumentClient`.
- `SubmissionCredentials`: resolved token and signature values.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `ClientConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .client import DEFAULT_API_URL
from .http.rate_limiter import WindowUnit
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_positive_number,
)


_DEFAULT_REQUEST_LIMIT = 1
_DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic credential precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SubmissionCredentials:
    """Resolved credentials for one submission.

    Attributes:
        auth_token: Bearer token, when resolved.
        signature: Document signature, when resolved.
    """

    auth_token: str | None = None
    signature: str | None = None


@dataclass(slots=True)
class ClientConfig:
    """Settings for one `DocumentClient`.

    Attributes:
        api_url: Registration endpoint URL.
        request_limit: Admissions allowed per window.
        window_unit: Length of one admission window.
        timeout_seconds: HTTP request timeout.
        verify_tls: Whether TLS certificates are verified.
        auth_token: Optional bearer token (never persisted by the client).
        signature: Optional document signature.
        runtime_sources: Optional credential source overrides injected by CLI.
    """

    api_url: str = DEFAULT_API_URL
    request_limit: int = _DEFAULT_REQUEST_LIMIT
    window_unit: WindowUnit = WindowUnit.SECONDS
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    verify_tls: bool = True
    auth_token: str | None = None
    signature: str | None = None
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    def validate(self) -> None:
        """Validate configuration values before a client is built."""

        if normalize_optional_string(self.api_url) is None:
            raise ValueError("`api_url` must be a non-empty string.")
        parse_positive_number(self.request_limit, "request_limit", integer=True)
        parse_positive_number(self.timeout_seconds, "timeout_seconds", integer=False)
        if not isinstance(self.window_unit, WindowUnit):
            raise ValueError("`window_unit` must be a `WindowUnit` value.")

    def resolved_credentials(
        self, sources: RuntimeConfigSources | None = None
    ) -> SubmissionCredentials:
        """Resolve token and signature with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field value.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources
        return SubmissionCredentials(
            auth_token=self._resolve_optional_runtime_value(
                key="auth_token",
                env_key="CRPT_AUTH_TOKEN",
                default_value=self.auth_token,
                sources=resolved_sources,
            ),
            signature=self._resolve_optional_runtime_value(
                key="signature",
                env_key="CRPT_SIGNATURE",
                default_value=self.signature,
                sources=resolved_sources,
            ),
        )

    def _resolve_optional_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in deterministic order."""

        cli_value = self._normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        secure_value = self._normalized_lookup(sources.secure, key)
        if secure_value is not None:
            return secure_value

        env_value = self._normalized_lookup(sources.env, env_key)
        if env_value is not None:
            return env_value

        return normalize_optional_string(default_value)

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))


class ConfigLoader:
    """Factory methods for creating `ClientConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "api_url",
            "request_limit",
            "window_unit",
            "timeout_seconds",
            "verify_tls",
            "auth_token",
            "signature",
        }
    )
    _RUNTIME_ENV_KEYS = frozenset({"CRPT_AUTH_TOKEN", "CRPT_SIGNATURE"})

    @staticmethod
    def from_yaml(path: Path) -> ClientConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(path_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ClientConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key, env_key in (
            ("api_url", "CRPT_API_URL"),
            ("request_limit", "CRPT_REQUEST_LIMIT"),
            ("window_unit", "CRPT_WINDOW_UNIT"),
            ("timeout_seconds", "CRPT_TIMEOUT_SECONDS"),
            ("verify_tls", "CRPT_VERIFY_TLS"),
        ):
            value = normalize_optional_string(env_map.get(env_key))
            if value is not None:
                payload[key] = value

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }

        config = ConfigLoader._build_config_from_mapping(payload, source_label="Environment")
        config.runtime_sources = RuntimeConfigSources(env=runtime_env)
        return config

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> ClientConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        api_url = normalize_optional_string(payload.get("api_url")) or DEFAULT_API_URL
        request_limit = ConfigLoader._optional_positive(
            payload, "request_limit", source_label, default=_DEFAULT_REQUEST_LIMIT, integer=True
        )
        timeout_seconds = ConfigLoader._optional_positive(
            payload,
            "timeout_seconds",
            source_label,
            default=_DEFAULT_TIMEOUT_SECONDS,
            integer=False,
        )
        window_unit = WindowUnit.SECONDS
        if normalize_optional_string(payload.get("window_unit")) is not None:
            try:
                window_unit = WindowUnit.parse(payload["window_unit"])
            except ValueError as exc:
                raise ValueError(f"{source_label} field `window_unit`: {exc}") from exc
        verify_tls = ConfigLoader._optional_boolean(payload, "verify_tls", source_label, default=True)

        config = ClientConfig(
            api_url=api_url,
            request_limit=int(request_limit),
            window_unit=window_unit,
            timeout_seconds=float(timeout_seconds),
            verify_tls=verify_tls,
            auth_token=normalize_optional_string(payload.get("auth_token")),
            signature=normalize_optional_string(payload.get("signature")),
        )
        config.validate()
        return config

    @staticmethod
    def _optional_positive(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        *,
        default: int | float,
        integer: bool,
    ) -> int | float:
        """Read and validate a positive numeric payload field."""

        if key not in payload or normalize_optional_string(payload[key]) is None:
            return default
        try:
            return parse_positive_number(payload[key], key, integer=integer)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
