"""Tracked repository value types and ordering rules."""

from __future__ import annotations

from .models import (
    FetchedEntry,
    Provider,
    ReadErr,
    ReadOk,
    ReadResult,
    Repo,
    TrackedSetting,
)
from .ordering import favourite_count, find_index, sort_for_display

__all__ = [
    "FetchedEntry",
    "Provider",
    "ReadErr",
    "ReadOk",
    "ReadResult",
    "Repo",
    "TrackedSetting",
    "favourite_count",
    "find_index",
    "sort_for_display",
]
