"""Configuration for the HTTP command backend."""

from __future__ import annotations

import dataclasses
import math
import os

from starwatch.backend.errors import BackendConfigError

_DEFAULT_TIMEOUT_S = 10.0


@dataclasses.dataclass(frozen=True, slots=True)
class BackendConfig:
    """Connection settings for the external backend process.

    Attributes
    ----------
    base_url
        Base URL commands are posted under, e.g. ``http://127.0.0.1:1420/invoke``.
    timeout_s
        Per-command timeout in seconds.

    """

    base_url: str
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @staticmethod
    def _parse_timeout_from_env() -> float:
        raw = os.environ.get("STARWATCH_BACKEND_TIMEOUT_S", "")
        if not raw.strip():
            return _DEFAULT_TIMEOUT_S
        try:
            value = float(raw)
        except ValueError as exc:
            raise BackendConfigError.invalid_timeout(raw) from exc
        if not math.isfinite(value) or value <= 0:
            raise BackendConfigError.invalid_timeout(raw)
        return value

    @classmethod
    def from_env(cls) -> BackendConfig:
        """Build configuration from environment variables.

        Reads ``STARWATCH_BACKEND_URL`` (required) and
        ``STARWATCH_BACKEND_TIMEOUT_S`` (optional positive number).

        Raises
        ------
        BackendConfigError
            If the URL is missing or the timeout is invalid.

        """
        base_url = os.environ.get("STARWATCH_BACKEND_URL", "").strip()
        if not base_url:
            raise BackendConfigError.missing_url()
        return cls(
            base_url=base_url.rstrip("/"),
            timeout_s=cls._parse_timeout_from_env(),
        )
