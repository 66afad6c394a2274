"""In-process implementation of the backend command interface.

``InMemoryBackend`` behaves like the desktop backend without disk or network
access. It is used by the test suite and for offline development
(``STARWATCH_BACKEND=memory``).
"""

from __future__ import annotations

import asyncio
import collections
import dataclasses
import typing as typ
import uuid as uuid_mod

from starwatch.backend.errors import BackendCommandError, BackendTransportError
from starwatch.tracking.models import (
    FetchedEntry,
    Provider,
    ReadErr,
    ReadOk,
    ReadResult,
    TrackedSetting,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

type RepoKey = tuple[Provider, str, str]


@dataclasses.dataclass(frozen=True, slots=True)
class BackendCall:
    """One recorded command invocation."""

    command: str
    setting: TrackedSetting | None = None


def _repo_key(setting: TrackedSetting) -> RepoKey:
    repo = setting.repo
    return (repo.provider, repo.owner, repo.name)


def _default_ids() -> cabc.Callable[[], str]:
    return lambda: str(uuid_mod.uuid4())


class InMemoryBackend:
    """Deterministic backend that keeps settings in a dict.

    Star counts come from a fixed catalogue keyed by provider, owner and name.
    ``create`` rejects repositories missing from the catalogue, as the real
    backend does for repositories it cannot resolve. ``update`` of a
    favourite clears the flag on every other stored setting.

    Parameters
    ----------
    stars
        Catalogue of known repositories and their star counts.
    settings
        Settings persisted before the first command.
    id_factory
        Callable producing identifiers for ``uuid``. Defaults to UUID4.

    Examples
    --------
    >>> import asyncio
    >>> backend = InMemoryBackend(stars={(Provider.GITHUB, "octo", "cat"): 42})
    >>> asyncio.run(backend.read())
    []

    """

    def __init__(
        self,
        *,
        stars: cabc.Mapping[RepoKey, int] | None = None,
        settings: cabc.Iterable[TrackedSetting] = (),
        id_factory: cabc.Callable[[], str] | None = None,
    ) -> None:
        """Seed the catalogue and persisted settings."""
        self._stars: dict[RepoKey, int] = dict(stars or {})
        self._settings: dict[str, TrackedSetting] = {s.id: s for s in settings}
        self._id_factory = id_factory or _default_ids()
        self._failures: dict[str, collections.deque[str]] = collections.defaultdict(
            collections.deque
        )
        self._unreadable: dict[str, str] = {}
        self._gates: dict[str, asyncio.Event] = {}
        self.calls: list[BackendCall] = []

    @property
    def settings(self) -> dict[str, TrackedSetting]:
        """Return a copy of the persisted settings keyed by id."""
        return dict(self._settings)

    def set_stars(self, provider: Provider, owner: str, name: str, stars: int) -> None:
        """Add or change a catalogue star count."""
        self._stars[(provider, owner, name)] = stars

    def fail_next(self, command: str, reason: str = "backend failure") -> None:
        """Make the next call of ``command`` fail.

        ``read`` fails with ``BackendTransportError``; every other command is
        rejected with ``BackendCommandError``.
        """
        self._failures[command].append(reason)

    def mark_unreadable(self, setting_id: str, reason: str = "unreadable") -> None:
        """Report ``setting_id`` as an ``Err`` result from ``read``."""
        self._unreadable[setting_id] = reason

    def pause(self, command: str) -> asyncio.Event:
        """Block calls of ``command`` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[command] = gate
        return gate

    def commands(self) -> list[str]:
        """Return the recorded command names in call order."""
        return [call.command for call in self.calls]

    async def read(self) -> list[ReadResult]:
        """Return one result per persisted setting, ordered by ``order``."""
        await self._enter("read")
        results: list[ReadResult] = []
        for setting in sorted(self._settings.values(), key=lambda s: s.order):
            reason = self._unreadable.get(setting.id)
            stars = self._stars.get(_repo_key(setting))
            if reason is not None:
                results.append(ReadErr(reason))
            elif stars is None:
                results.append(ReadErr(f"repository not found: {setting.repo.slug}"))
            else:
                results.append(ReadOk(FetchedEntry(setting=setting, stars=stars)))
        return results

    async def uuid(self) -> str:
        """Return an identifier from the configured factory."""
        await self._enter("uuid")
        return self._id_factory()

    async def create(self, setting: TrackedSetting) -> int:
        """Persist ``setting`` and return its catalogue star count."""
        await self._enter("create", setting)
        stars = self._stars.get(_repo_key(setting))
        if stars is None:
            raise BackendCommandError(
                "create", f"repository not found: {setting.repo.slug}"
            )
        self._settings[setting.id] = setting
        return stars

    async def update(self, setting: TrackedSetting) -> None:
        """Replace the stored setting with the same id."""
        await self._enter("update", setting)
        if setting.id not in self._settings:
            raise BackendCommandError("update", f"unknown setting: {setting.id}")
        if setting.favourite:
            for other_id, other in self._settings.items():
                if other_id != setting.id and other.favourite:
                    self._settings[other_id] = other.with_favourite(False)
        self._settings[setting.id] = setting

    async def delete(self, setting: TrackedSetting) -> None:
        """Remove the stored setting with the same id."""
        await self._enter("delete", setting)
        if self._settings.pop(setting.id, None) is None:
            raise BackendCommandError("delete", f"unknown setting: {setting.id}")

    async def _enter(self, command: str, setting: TrackedSetting | None = None) -> None:
        self.calls.append(BackendCall(command=command, setting=setting))
        gate = self._gates.get(command)
        if gate is not None:
            await gate.wait()
        failures = self._failures.get(command)
        if failures:
            reason = failures.popleft()
            if command == "read":
                raise BackendTransportError(command, reason)
            raise BackendCommandError(command, reason)
