"""Client-side state for the tracked repository list.

``RepoListStore`` keeps the list of tracked repositories and their star
counts, enforces the single-favourite rule, and keeps local state consistent
with the backend when commands fail.

Usage
-----
Open a store against a backend and mutate it::

    from starwatch.store import RepoListStore

    store = await RepoListStore.open(backend)
    await store.add("GitHub", "octo", "cat")
    await store.toggle_favourite(store.entries[-1].id)

Show failures to the user::

    store.notifier.subscribe(lambda notice: banner.show(notice))

"""

from __future__ import annotations

from .config import StoreConfig
from .errors import (
    CreateRejectedError,
    LoadFailedError,
    MutationFailedError,
    StoreError,
    StoreNotReadyError,
)
from .models import (
    MutationPolicy,
    OperationResult,
    OperationStatus,
    RepoDraft,
    StoreState,
)
from .notifications import ErrorNotifier, Notice
from .observability import StoreEventLogger, StoreEventType
from .service import RepoListStore

__all__ = [
    "CreateRejectedError",
    "ErrorNotifier",
    "LoadFailedError",
    "MutationFailedError",
    "MutationPolicy",
    "Notice",
    "OperationResult",
    "OperationStatus",
    "RepoDraft",
    "RepoListStore",
    "StoreConfig",
    "StoreError",
    "StoreEventLogger",
    "StoreEventType",
    "StoreNotReadyError",
    "StoreState",
]
