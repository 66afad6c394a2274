"""Command interface of the external settings and star-count backend."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from starwatch.tracking.models import ReadResult, TrackedSetting


@typ.runtime_checkable
class BackendCommands(typ.Protocol):
    """Asynchronous commands exposed by the backend process.

    Each call is an independent round trip. Nothing spans two commands, so
    ``uuid`` followed by ``create`` is not atomic. Failed commands raise a
    :class:`~starwatch.backend.errors.BackendError` subclass.

    Examples
    --------
    >>> from starwatch.backend import BackendCommands, InMemoryBackend
    >>> isinstance(InMemoryBackend(), BackendCommands)
    True

    """

    async def read(self) -> list[ReadResult]:
        """Return every tracked entry, each read independently."""
        ...

    async def uuid(self) -> str:
        """Return a fresh opaque identifier for a new tracked entry."""
        ...

    async def create(self, setting: TrackedSetting) -> int:
        """Persist a new entry and return its current star count."""
        ...

    async def update(self, setting: TrackedSetting) -> None:
        """Persist a changed favourite flag or order."""
        ...

    async def delete(self, setting: TrackedSetting) -> None:
        """Remove a persisted entry."""
        ...
