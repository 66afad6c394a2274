"""Builders shared by unit and feature tests."""

from __future__ import annotations

import asyncio
import itertools
import typing as typ

from starwatch.backend.errors import BackendCommandError
from starwatch.backend.memory import BackendCall, InMemoryBackend
from starwatch.tracking.models import FetchedEntry, Provider, Repo, TrackedSetting

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from starwatch.store.notifications import ErrorNotifier, Notice

DEFAULT_STARS: dict[tuple[Provider, str, str], int] = {
    (Provider.GITHUB, "octo", "cat"): 42,
    (Provider.GITHUB, "octo", "reef"): 1_234,
    (Provider.GITHUB, "octo", "kelp"): 7,
    (Provider.GITLAB, "gitlab-org", "gitlab"): 5_100,
}


class ScriptedBackend(InMemoryBackend):
    """In-memory backend that rejects chosen ``update`` calls by position.

    ``failing_updates`` holds 1-based call numbers, so ``{2}`` lets the first
    ``update`` through and rejects the second.
    """

    def __init__(
        self, *, failing_updates: cabc.Iterable[int] = (), **kwargs: typ.Any
    ) -> None:
        super().__init__(**kwargs)
        self._failing_updates = frozenset(failing_updates)
        self._update_count = 0

    async def update(self, setting: TrackedSetting) -> None:
        self._update_count += 1
        if self._update_count in self._failing_updates:
            self.calls.append(BackendCall(command="update", setting=setting))
            raise BackendCommandError(
                "update", f"scripted failure #{self._update_count}"
            )
        await super().update(setting)


def make_setting(
    setting_id: str,
    order: int,
    *,
    favourite: bool = False,
    owner: str = "octo",
    name: str | None = None,
    provider: Provider = Provider.GITHUB,
) -> TrackedSetting:
    """Build a tracked setting; the repository name defaults to the id."""
    return TrackedSetting(
        id=setting_id,
        order=order,
        favourite=favourite,
        repo=Repo(provider=provider, owner=owner, name=name or setting_id),
    )


def make_entry(setting: TrackedSetting, stars: int = 1) -> FetchedEntry:
    """Wrap a setting in a fetched entry."""
    return FetchedEntry(setting=setting, stars=stars)


def sequential_ids(prefix: str = "id") -> cabc.Callable[[], str]:
    """Return a factory yielding ``prefix-1``, ``prefix-2``..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def seeded_backend(
    *settings: TrackedSetting, failing_updates: cabc.Iterable[int] = ()
) -> InMemoryBackend:
    """Build a backend that knows star counts for every given setting.

    Settings without a catalogue entry get ``10 * position`` stars, so the
    first is worth 10, the second 20 and so on.
    """
    stars = dict(DEFAULT_STARS)
    for index, setting in enumerate(settings):
        repo = setting.repo
        stars.setdefault((repo.provider, repo.owner, repo.name), 10 * (index + 1))
    return ScriptedBackend(
        failing_updates=failing_updates,
        stars=stars,
        settings=settings,
        id_factory=sequential_ids("new"),
    )


async def wait_for_calls(
    backend: InMemoryBackend, command: str, count: int = 1
) -> None:
    """Yield to the loop until ``command`` has been invoked ``count`` times."""
    for _ in range(100):
        if backend.commands().count(command) >= count:
            return
        await asyncio.sleep(0)
    msg = f"expected {count} {command!r} call(s), saw {backend.commands()}"
    raise AssertionError(msg)


def favourite_ids(entries: cabc.Iterable[FetchedEntry]) -> list[str]:
    """Return the ids of entries flagged favourite."""
    return [entry.setting.id for entry in entries if entry.setting.favourite]


def entry_ids(entries: cabc.Iterable[FetchedEntry]) -> list[str]:
    """Return entry ids in list order."""
    return [entry.setting.id for entry in entries]


def stored_favourites(backend: InMemoryBackend) -> list[str]:
    """Return ids the backend holds as favourites."""
    return sorted(s.id for s in backend.settings.values() if s.favourite)


def record_notices(notifier: ErrorNotifier) -> list[Notice]:
    """Collect every notice ``notifier`` raises from now on."""
    notices: list[Notice] = []

    def _record(notice: Notice | None) -> None:
        if notice is not None:
            notices.append(notice)

    notifier.subscribe(_record)
    return notices
