"""Secure credential storage helpers for the crptclient CLI.

Responsibilities:
- Persist the registration API auth token in an OS-backed credential store.
- Provide deterministic read/write/delete operations for that token.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType

import keyring
from keyring.backends import fail as keyring_fail


_DEFAULT_SERVICE_NAME = "crptclient"
_DEFAULT_ACCOUNT_NAME = "auth_token"


@dataclass(slots=True)
class KeyringCredentialStore:
    """Secure credential store backed by the `keyring` package."""

    service_name: str = _DEFAULT_SERVICE_NAME
    account_name: str = _DEFAULT_ACCOUNT_NAME

    def _load_keyring_module(self) -> ModuleType | None:
        """Return the `keyring` module, or `None` when no usable backend is configured."""

        if isinstance(keyring.get_keyring(), keyring_fail.Keyring):
            return None
        return keyring

    def is_available(self) -> bool:
        """Return `True` when a usable keyring backend is configured."""

        return self._load_keyring_module() is not None

    def get_auth_token(self) -> str | None:
        """Get a normalized auth token from keyring, returning `None` when missing."""

        keyring_module = self._load_keyring_module()
        if keyring_module is None:
            return None
        value = keyring_module.get_password(self.service_name, self.account_name)
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            return None
        return normalized

    def set_auth_token(self, auth_token: str) -> None:
        """Persist a normalized auth token in keyring or raise when unavailable."""

        keyring_module = self._load_keyring_module()
        if keyring_module is None:
            raise RuntimeError(
                "Secure credential storage is unavailable because no keyring backend "
                "is configured. Configure a `keyring` backend to persist tokens securely."
            )

        normalized = auth_token.strip()
        if not normalized:
            raise ValueError("Auth token must be a non-empty string.")
        keyring_module.set_password(self.service_name, self.account_name, normalized)

    def clear_auth_token(self) -> bool:
        """Remove the stored auth token from keyring and report if one was present."""

        keyring_module = self._load_keyring_module()
        if keyring_module is None:
            return False

        existing = self.get_auth_token()
        if existing is None:
            return False

        keyring_module.delete_password(self.service_name, self.account_name)
        return True


def create_credential_store() -> KeyringCredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
