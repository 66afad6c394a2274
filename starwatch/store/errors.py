"""Errors reported by repository list store operations."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from starwatch.store.models import StoreState


class StoreError(Exception):
    """Base class for store operation failures.

    Store operations never raise these; they are returned inside an
    ``OperationResult`` and published through the ``ErrorNotifier``.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        """Initialise with a message and the underlying backend error."""
        self.cause = cause
        super().__init__(message)


class LoadFailedError(StoreError):
    """Raised when the backend ``read`` command fails as a whole."""

    @classmethod
    def from_backend(cls, exc: BaseException) -> LoadFailedError:
        """Wrap a backend failure raised by ``read``."""
        return cls(f"Could not load repositories: {exc}", cause=exc)


class CreateRejectedError(StoreError):
    """Raised when the backend refuses to create a new tracked entry."""

    def __init__(self, slug: str, *, cause: BaseException | None = None) -> None:
        """Initialise with the slug that could not be added."""
        self.slug = slug
        super().__init__(f"Could not add {slug}: {cause}", cause=cause)


class MutationFailedError(StoreError):
    """Raised when ``update`` or ``delete`` fails for an existing entry."""

    def __init__(
        self, operation: str, setting_id: str, *, cause: BaseException | None = None
    ) -> None:
        """Initialise with the operation name and the targeted setting id."""
        self.operation = operation
        self.setting_id = setting_id
        super().__init__(f"{operation} failed for {setting_id}: {cause}", cause=cause)


class StoreNotReadyError(StoreError):
    """Raised when a mutation is attempted before a successful load."""

    def __init__(self, state: StoreState) -> None:
        """Initialise with the current lifecycle state."""
        self.state = state
        super().__init__(f"Repository list is not ready (state={state})")
