"""Adapters for the external settings and star-count backend.

The backend process owns persistence, star lookups and identifier
generation. Starwatch reaches it only through five asynchronous commands:
``read``, ``uuid``, ``create``, ``update`` and ``delete``.

Usage
-----
Talk to a running backend over HTTP::

    from starwatch.backend import BackendConfig, HttpCommandBackend

    backend = HttpCommandBackend(BackendConfig(base_url="http://127.0.0.1:1420"))
    results = await backend.read()
    await backend.aclose()

Use the in-process backend in tests::

    backend = InMemoryBackend(stars={(Provider.GITHUB, "octo", "cat"): 42})

"""

from __future__ import annotations

from .config import BackendConfig
from .errors import (
    BackendCommandError,
    BackendConfigError,
    BackendError,
    BackendTransportError,
)
from .factory import create_backend
from .http import HttpCommandBackend
from .memory import BackendCall, InMemoryBackend
from .protocol import BackendCommands

__all__ = [
    "BackendCall",
    "BackendCommandError",
    "BackendCommands",
    "BackendConfig",
    "BackendConfigError",
    "BackendError",
    "BackendTransportError",
    "HttpCommandBackend",
    "InMemoryBackend",
    "create_backend",
]
