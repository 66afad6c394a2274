"""Repository list store: the single source of truth for tracked entries.

The store holds the ordered list of tracked repositories with their star
counts, turns user intents into backend commands, and keeps the local list
consistent with the backend when those commands fail.
"""

from __future__ import annotations

import asyncio
import itertools
import typing as typ

from starwatch.backend.errors import BackendError
from starwatch.store.config import StoreConfig
from starwatch.store.errors import (
    CreateRejectedError,
    LoadFailedError,
    MutationFailedError,
    StoreError,
    StoreNotReadyError,
)
from starwatch.store.models import (
    MutationPolicy,
    OperationResult,
    RepoDraft,
    StoreState,
)
from starwatch.store.notifications import ErrorNotifier
from starwatch.store.observability import StoreEventLogger
from starwatch.tracking.models import (
    FetchedEntry,
    Provider,
    ReadErr,
    ReadOk,
    Repo,
    TrackedSetting,
)
from starwatch.tracking.ordering import find_index, sort_for_display

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from starwatch.backend.protocol import BackendCommands

type EntriesListener = cabc.Callable[[tuple[FetchedEntry, ...]], None]
type SettingChange = tuple[TrackedSetting, TrackedSetting]

_MOVE_OFFSETS = frozenset({-1, 1})


class RepoListStore:
    """Own the tracked repository list and every mutation applied to it.

    Operations run one at a time under an ``asyncio.Lock``, so a second
    operation issued while the first is waiting on the backend starts only
    after the first has committed or rolled back. Backend failures never
    escape an operation: each returns an :class:`OperationResult`, logs the
    failure and publishes a notice through the :class:`ErrorNotifier`.

    Invariants
    ----------
    - At most one entry has ``favourite`` set.
    - After ``load`` the favourite (if any) is first and the remaining
      entries follow in ascending ``order``.
    - ``order`` values are historical insertion indexes and may have gaps.

    Parameters
    ----------
    backend
        Command interface of the external backend.
    config
        Notice lifetime and mutation policy. Defaults to ``StoreConfig()``.
    notifier
        Notice publisher. Defaults to one using ``config.notice_ttl_s``.
    event_logger
        Structured event logger. Defaults to ``StoreEventLogger()``.

    Usage
    -----
    ::

        store = await RepoListStore.open(backend)
        result = await store.add(Provider.GITHUB, "octo", "cat")
        if not result.ok:
            print(store.notifier.active.message)

    """

    def __init__(
        self,
        backend: BackendCommands,
        *,
        config: StoreConfig | None = None,
        notifier: ErrorNotifier | None = None,
        event_logger: StoreEventLogger | None = None,
    ) -> None:
        """Configure the store; call ``initialize`` before mutating."""
        self._backend = backend
        self._config = config or StoreConfig()
        self._notifier = notifier or ErrorNotifier(self._config.notice_ttl_s)
        self._events = event_logger or StoreEventLogger()
        self._entries: tuple[FetchedEntry, ...] = ()
        self._state = StoreState.INIT
        self._lock = asyncio.Lock()
        self._listeners: list[EntriesListener] = []
        self.draft = RepoDraft()

    @classmethod
    async def open(
        cls,
        backend: BackendCommands,
        *,
        config: StoreConfig | None = None,
        notifier: ErrorNotifier | None = None,
        event_logger: StoreEventLogger | None = None,
    ) -> RepoListStore:
        """Construct a store and run its initial load.

        The returned store is ``READY`` on success and ``ERROR`` when the
        backend ``read`` command failed.
        """
        store = cls(
            backend, config=config, notifier=notifier, event_logger=event_logger
        )
        await store.initialize()
        return store

    @property
    def state(self) -> StoreState:
        """Return the lifecycle state."""
        return self._state

    @property
    def entries(self) -> tuple[FetchedEntry, ...]:
        """Return the current list in display order."""
        return self._entries

    @property
    def favourite(self) -> FetchedEntry | None:
        """Return the favourite entry, if any."""
        return next((e for e in self._entries if e.setting.favourite), None)

    @property
    def config(self) -> StoreConfig:
        """Read-only access to the store configuration."""
        return self._config

    @property
    def notifier(self) -> ErrorNotifier:
        """Return the notice publisher used for failures."""
        return self._notifier

    def subscribe(self, listener: EntriesListener) -> cabc.Callable[[], None]:
        """Call ``listener`` with the new list after every commit.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def initialize(self) -> OperationResult:
        """Run the initial load that moves the store out of ``INIT``."""
        return await self.load()

    async def load(self) -> OperationResult:
        """Replace the list with the backend's current entries.

        Entries the backend reports as errors are dropped. The rest are
        sorted favourite-first, then by ``order``. If the backend reports
        more than one favourite, only the first in display order keeps the
        flag locally. When ``read`` itself fails the previous list is kept
        and the store moves to ``ERROR``.
        """
        async with self._lock:
            try:
                results = await self._backend.read()
            except BackendError as exc:
                error = LoadFailedError.from_backend(exc)
                self._state = StoreState.ERROR
                self._events.log_load_failed(error)
                self._notifier.notify(error)
                return OperationResult.failed(error)

            loaded: list[FetchedEntry] = []
            for result in results:
                match result:
                    case ReadOk(value=entry):
                        loaded.append(entry)
                    case ReadErr(message=message):
                        self._events.log_entry_dropped(reason=message)

            self._state = StoreState.READY
            ordered = self._single_favourite(sort_for_display(loaded))
            self._commit(sort_for_display(ordered))
            self._events.log_load_completed(
                loaded=len(loaded), dropped=len(results) - len(loaded)
            )
            return OperationResult.applied()

    async def refresh(self) -> OperationResult:
        """Reload star counts and settings from the backend."""
        return await self.load()

    async def add(
        self, provider: Provider | str, owner: str, name: str
    ) -> OperationResult:
        """Track a new repository at the end of the list.

        Blank ``owner`` or ``name``, or a ``provider`` that is not a
        :class:`Provider` value, makes this a no-op. Otherwise a new id is
        requested with ``uuid`` and the entry is created with
        ``order = len(entries)`` and ``favourite = False``. The entry is
        appended only after ``create`` returns its star count; on success the
        draft's owner and name are cleared.
        """
        owner = owner.strip()
        name = name.strip()
        if not owner or not name:
            return OperationResult.skipped()
        try:
            provider = Provider(provider)
        except ValueError:
            self._events.log_operation_skipped(
                operation="add", reason=f"unknown provider {provider!r}"
            )
            return OperationResult.skipped()

        async with self._lock:
            if self._state is not StoreState.READY:
                return self._fail("add", StoreNotReadyError(self._state))

            repo = Repo(provider=provider, owner=owner, name=name)
            try:
                setting_id = await self._backend.uuid()
                setting = TrackedSetting(
                    id=setting_id,
                    order=len(self._entries),
                    favourite=False,
                    repo=repo,
                )
                stars = await self._backend.create(setting)
            except BackendError as exc:
                return self._fail("add", CreateRejectedError(repo.slug, cause=exc))

            self._commit([*self._entries, FetchedEntry(setting=setting, stars=stars)])
            self.draft.clear()
            self._events.log_operation_applied(operation="add", setting_id=setting.id)
            return OperationResult.applied()

    async def submit_draft(self) -> OperationResult:
        """Run ``add`` with the values held in ``draft``."""
        draft = self.draft
        return await self.add(draft.provider, draft.owner, draft.name)

    async def toggle_favourite(self, setting_id: str) -> OperationResult:
        """Flip the favourite flag of ``setting_id``.

        Promoting an entry demotes the current favourite. Every changed
        setting is persisted with ``update``, demotions first, so the backend
        never holds two favourites. The list is re-sorted afterwards. An
        unknown id is a no-op.
        """
        async with self._lock:
            if self._state is not StoreState.READY:
                return self._fail("toggle_favourite", StoreNotReadyError(self._state))

            index = find_index(self._entries, setting_id)
            if index is None:
                return OperationResult.skipped()

            target = self._entries[index].setting
            promote = not target.favourite
            changes: list[SettingChange] = []
            if promote:
                changes.extend(
                    (entry.setting, entry.setting.with_favourite(False))
                    for entry in self._entries
                    if entry.setting.favourite and entry.setting.id != setting_id
                )
            changes.append((target, target.with_favourite(promote)))

            proposed = sort_for_display(
                self._replace_settings(self._entries, [new for _, new in changes])
            )
            return await self._persist(
                "toggle_favourite", setting_id, updates=changes, proposed=proposed
            )

    async def delete(self, setting_id: str) -> OperationResult:
        """Stop tracking ``setting_id``.

        A favourite is first demoted and that change persisted with
        ``update``; then ``delete`` is sent. Remaining ``order`` values are
        left as they are. An unknown id is a no-op.
        """
        async with self._lock:
            if self._state is not StoreState.READY:
                return self._fail("delete", StoreNotReadyError(self._state))

            index = find_index(self._entries, setting_id)
            if index is None:
                return OperationResult.skipped()

            setting = self._entries[index].setting
            changes: list[SettingChange] = []
            if setting.favourite:
                demoted = setting.with_favourite(False)
                changes.append((setting, demoted))
                setting = demoted

            proposed = [e for e in self._entries if e.setting.id != setting_id]
            return await self._persist(
                "delete",
                setting_id,
                updates=changes,
                proposed=proposed,
                delete=setting,
            )

    async def move(self, setting_id: str, offset: int) -> OperationResult:
        """Swap a non-favourite entry with its neighbour.

        ``offset`` is ``-1`` to move up or ``1`` to move down. The two
        entries exchange positions and ``order`` values. When that would not
        leave the non-favourite entries in strictly ascending ``order`` (equal
        orders, or a list whose orders were already out of step after an
        ``add``), every non-favourite entry is renumbered to its display
        position instead. Each changed setting is persisted with ``update``,
        so a reload shows the same list. Moving the favourite, onto the
        favourite, or past either end of the list is a no-op.

        Raises
        ------
        ValueError
            If ``offset`` is not ``-1`` or ``1``.

        """
        if offset not in _MOVE_OFFSETS:
            msg = f"offset must be -1 or 1, got: {offset}"
            raise ValueError(msg)

        async with self._lock:
            if self._state is not StoreState.READY:
                return self._fail("move", StoreNotReadyError(self._state))

            index = find_index(self._entries, setting_id)
            if index is None:
                return OperationResult.skipped()
            other_index = index + offset
            if not 0 <= other_index < len(self._entries):
                return OperationResult.skipped()

            current = self._entries[index]
            other = self._entries[other_index]
            if current.setting.favourite or other.setting.favourite:
                return OperationResult.skipped()

            proposed = list(self._entries)
            proposed[index] = other.with_setting(
                other.setting.with_order(current.setting.order)
            )
            proposed[other_index] = current.with_setting(
                current.setting.with_order(other.setting.order)
            )
            if not _orders_ascending(proposed):
                proposed = _renumbered(proposed)

            previous = {entry.id: entry.setting for entry in self._entries}
            changes: list[SettingChange] = [
                (previous[entry.id], entry.setting)
                for entry in proposed
                if entry.setting != previous[entry.id]
            ]
            return await self._persist(
                "move", setting_id, updates=changes, proposed=proposed
            )

    async def _persist(
        self,
        operation: str,
        setting_id: str,
        *,
        updates: cabc.Sequence[SettingChange],
        proposed: cabc.Sequence[FetchedEntry],
        delete: TrackedSetting | None = None,
    ) -> OperationResult:
        """Send ``updates`` (then ``delete``) and commit ``proposed``.

        Under ``CONFIRM`` the list changes only after every call succeeded.
        Under ``OPTIMISTIC`` it changes first and is restored on failure.
        Updates that succeeded before a failure are reverted with
        compensating ``update`` calls.
        """
        previous = self._entries
        optimistic = self._config.mutation_policy is MutationPolicy.OPTIMISTIC
        if optimistic:
            self._commit(proposed)

        persisted: list[TrackedSetting] = []
        try:
            for before, after in updates:
                await self._backend.update(after)
                persisted.append(before)
            if delete is not None:
                await self._backend.delete(delete)
        except BackendError as exc:
            await self._compensate(persisted)
            if optimistic:
                self._commit(previous)
            return self._fail(
                operation, MutationFailedError(operation, setting_id, cause=exc)
            )

        if not optimistic:
            self._commit(proposed)
        self._events.log_operation_applied(operation=operation, setting_id=setting_id)
        return OperationResult.applied()

    async def _compensate(self, persisted: cabc.Sequence[TrackedSetting]) -> None:
        """Restore already-persisted settings, newest first."""
        for setting in reversed(persisted):
            try:
                await self._backend.update(setting)
            except BackendError as exc:
                self._events.log_compensation_failed(setting_id=setting.id, error=exc)

    def _fail(self, operation: str, error: StoreError) -> OperationResult:
        self._events.log_operation_failed(operation=operation, error=error)
        self._notifier.notify(error)
        return OperationResult.failed(error)

    def _commit(self, entries: cabc.Iterable[FetchedEntry]) -> None:
        self._entries = tuple(entries)
        for listener in list(self._listeners):
            listener(self._entries)

    def _single_favourite(
        self, entries: cabc.Sequence[FetchedEntry]
    ) -> list[FetchedEntry]:
        """Keep the favourite flag on the first favourite only."""
        seen = False
        result: list[FetchedEntry] = []
        for entry in entries:
            if not entry.setting.favourite:
                result.append(entry)
            elif not seen:
                seen = True
                result.append(entry)
            else:
                self._events.log_favourite_conflict(setting_id=entry.setting.id)
                result.append(entry.with_setting(entry.setting.with_favourite(False)))
        return result

    @staticmethod
    def _replace_settings(
        entries: cabc.Sequence[FetchedEntry],
        settings: cabc.Iterable[TrackedSetting],
    ) -> list[FetchedEntry]:
        by_id = {setting.id: setting for setting in settings}
        return [
            entry.with_setting(by_id[entry.setting.id])
            if entry.setting.id in by_id
            else entry
            for entry in entries
        ]


def _orders_ascending(entries: cabc.Iterable[FetchedEntry]) -> bool:
    """Return whether non-favourite orders strictly increase down the list."""
    orders = [entry.setting.order for entry in entries if not entry.setting.favourite]
    return all(a < b for a, b in itertools.pairwise(orders))


def _renumbered(entries: cabc.Sequence[FetchedEntry]) -> list[FetchedEntry]:
    """Set each non-favourite entry's ``order`` to its list position."""
    return [
        entry
        if entry.setting.favourite
        else entry.with_setting(entry.setting.with_order(position))
        for position, entry in enumerate(entries)
    ]
