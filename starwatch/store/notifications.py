"""Transient error notices for the hosting UI.

A notice is shown when a store operation fails and is dismissed
automatically after ``ttl_s`` seconds. A newer notice replaces the current
one and restarts the timer.
"""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from starwatch.store.errors import StoreError

type NoticeListener = cabc.Callable[[Notice | None], None]


@dataclasses.dataclass(frozen=True, slots=True)
class Notice:
    """An error to display until it expires."""

    error: StoreError

    @property
    def message(self) -> str:
        """Return the text shown to the user."""
        return str(self.error)


class ErrorNotifier:
    """Publish auto-dismissing error notices to subscribed listeners.

    Listeners are called with the new ``Notice`` when one is raised and with
    ``None`` when it is dismissed.
    """

    def __init__(self, ttl_s: float = 5.0) -> None:
        """Configure the dismissal delay."""
        self._ttl_s = ttl_s
        self._active: Notice | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._listeners: list[NoticeListener] = []

    @property
    def active(self) -> Notice | None:
        """Return the notice currently displayed, if any."""
        return self._active

    @property
    def ttl_s(self) -> float:
        """Return the dismissal delay in seconds."""
        return self._ttl_s

    def subscribe(self, listener: NoticeListener) -> cabc.Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def notify(self, error: StoreError) -> Notice:
        """Display a notice for ``error`` and schedule its dismissal.

        Must be called from a running event loop.
        """
        notice = Notice(error)
        self._cancel_timer()
        self._active = notice
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._ttl_s, self._expire, notice)
        self._publish(notice)
        return notice

    def dismiss(self) -> None:
        """Hide the active notice immediately."""
        self._cancel_timer()
        if self._active is None:
            return
        self._active = None
        self._publish(None)

    def _expire(self, notice: Notice) -> None:
        if self._active is notice:
            self._timer = None
            self._active = None
            self._publish(None)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _publish(self, notice: Notice | None) -> None:
        for listener in list(self._listeners):
            listener(notice)
