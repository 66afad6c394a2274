"""Errors raised by backend command adapters."""

from __future__ import annotations


class BackendError(Exception):
    """Base class for backend command failures."""


class BackendCommandError(BackendError):
    """Raised when the backend rejects a command.

    Attributes
    ----------
    command
        Name of the rejected command (``create``, ``update``...).
    reason
        Message reported by the backend.

    """

    def __init__(self, command: str, reason: str) -> None:
        """Initialise with the command name and the backend's reason."""
        self.command = command
        self.reason = reason
        super().__init__(f"Backend rejected {command}: {reason}")


class BackendTransportError(BackendError):
    """Raised when a command cannot reach the backend or gets a bad reply."""

    def __init__(
        self, command: str, message: str, *, status_code: int | None = None
    ) -> None:
        """Initialise with the command name, a message and an HTTP status."""
        self.command = command
        self.status_code = status_code
        super().__init__(f"{command}: {message}")

    @classmethod
    def timeout(cls, command: str) -> BackendTransportError:
        """Return an error for a timed-out command call."""
        return cls(command, "backend call timed out")

    @classmethod
    def network_error(cls, command: str, detail: str) -> BackendTransportError:
        """Return an error for connection-level failures."""
        return cls(command, f"network error: {detail}")

    @classmethod
    def http_error(cls, command: str, status_code: int) -> BackendTransportError:
        """Return an error for an unexpected HTTP status without a reason."""
        return cls(command, f"HTTP {status_code}", status_code=status_code)

    @classmethod
    def invalid_payload(cls, command: str, detail: str) -> BackendTransportError:
        """Return an error for a reply that does not decode."""
        return cls(command, f"invalid reply payload: {detail}")


class BackendConfigError(BackendError):
    """Raised when backend configuration is missing or invalid."""

    @classmethod
    def missing_url(cls) -> BackendConfigError:
        """Return an error when no backend URL is configured."""
        return cls("STARWATCH_BACKEND_URL is required for the http backend")

    @classmethod
    def invalid_backend(cls, value: str) -> BackendConfigError:
        """Return an error for an unrecognised backend kind."""
        return cls(
            f"Invalid STARWATCH_BACKEND value {value!r}; expected 'memory' or 'http'"
        )

    @classmethod
    def invalid_timeout(cls, value: str) -> BackendConfigError:
        """Return an error for a timeout that is not a positive finite number."""
        return cls(
            f"STARWATCH_BACKEND_TIMEOUT_S must be a positive number, got: {value!r}"
        )
