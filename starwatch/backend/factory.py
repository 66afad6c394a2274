"""Factory for creating backend adapters from environment configuration."""

from __future__ import annotations

import os
import typing as typ

from starwatch.backend.errors import BackendConfigError
from starwatch.backend.memory import InMemoryBackend

if typ.TYPE_CHECKING:
    from starwatch.backend.protocol import BackendCommands

_VALID_BACKENDS = frozenset({"memory", "http"})
_DEFAULT_BACKEND = "http"


def create_backend() -> BackendCommands:
    """Create a backend adapter based on environment configuration.

    Reads ``STARWATCH_BACKEND`` (``memory`` or ``http``; default ``http``).
    The ``http`` backend also reads ``STARWATCH_BACKEND_URL`` and
    ``STARWATCH_BACKEND_TIMEOUT_S``.

    Raises
    ------
    BackendConfigError
        If the backend kind is unknown or the HTTP configuration is invalid.

    Examples
    --------
    >>> import os
    >>> os.environ["STARWATCH_BACKEND"] = "memory"
    >>> isinstance(create_backend(), InMemoryBackend)
    True

    """
    raw_backend = os.environ.get("STARWATCH_BACKEND", "")
    backend = raw_backend.strip().lower() or _DEFAULT_BACKEND
    if backend not in _VALID_BACKENDS:
        raise BackendConfigError.invalid_backend(raw_backend)

    if backend == "memory":
        return InMemoryBackend()

    from starwatch.backend.config import BackendConfig
    from starwatch.backend.http import HttpCommandBackend

    return HttpCommandBackend(BackendConfig.from_env())
