"""Exception hierarchy shared by the bridge modules."""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for all llm-bridge errors."""


class MissingCredentialsError(BridgeError):
    """Raised when none of the configured credential sources holds a value."""

    def __init__(self, env_vars: list[str] | tuple[str, ...]) -> None:
        self.env_vars = tuple(env_vars)
        super().__init__(f"Missing API key. Please set one of: {', '.join(self.env_vars)}")


class BudgetExhaustedError(BridgeError):
    """Raised when a message set cannot be shrunk any further."""


class RetriesExhaustedError(BridgeError):
    """Raised when every attempt of a remote call has failed."""

    def __init__(self, attempts: int, last_error: str) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Remote call failed after {attempts} attempts: {last_error}")


class ClipboardError(BridgeError):
    """Raised when the system clipboard cannot be written."""
