"""Domain exceptions for CLI diagnostics."""

from __future__ import annotations


class ClientStageError(RuntimeError):
    """Raised when a specific step of a CLI command fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
