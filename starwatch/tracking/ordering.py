"""Display ordering and invariant helpers for tracked entries."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from starwatch.tracking.models import FetchedEntry


def _display_key(entry: FetchedEntry) -> tuple[int, int]:
    return (0 if entry.setting.favourite else 1, entry.setting.order)


def sort_for_display(entries: cabc.Iterable[FetchedEntry]) -> list[FetchedEntry]:
    """Return entries with the favourite first, then by ascending ``order``.

    The sort is stable: entries sharing an ``order`` keep their relative
    position.
    """
    return sorted(entries, key=_display_key)


def favourite_count(entries: cabc.Iterable[FetchedEntry]) -> int:
    """Count entries flagged as favourite."""
    return sum(1 for entry in entries if entry.setting.favourite)


def find_index(entries: cabc.Sequence[FetchedEntry], setting_id: str) -> int | None:
    """Return the position of ``setting_id`` or ``None`` when absent."""
    for index, entry in enumerate(entries):
        if entry.setting.id == setting_id:
            return index
    return None
