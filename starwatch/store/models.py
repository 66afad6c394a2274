"""Lifecycle, policy and result types for the repository list store."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from starwatch.tracking.models import Provider

if typ.TYPE_CHECKING:
    from starwatch.store.errors import StoreError


class StoreState(enum.StrEnum):
    """Lifecycle of the store's list."""

    INIT = "init"
    READY = "ready"
    ERROR = "error"


class MutationPolicy(enum.StrEnum):
    """When local state changes relative to backend confirmation.

    ``CONFIRM`` commits the new list only after every backend call succeeds.
    ``OPTIMISTIC`` commits first and restores the previous list on failure.
    """

    CONFIRM = "confirm"
    OPTIMISTIC = "optimistic"


class OperationStatus(enum.StrEnum):
    """Outcome of a store operation."""

    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome returned by every store operation."""

    status: OperationStatus
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        """Return True unless the operation failed."""
        return self.status is not OperationStatus.FAILED

    @classmethod
    def applied(cls) -> OperationResult:
        """Return an APPLIED result."""
        return cls(OperationStatus.APPLIED)

    @classmethod
    def skipped(cls) -> OperationResult:
        """Return a SKIPPED result."""
        return cls(OperationStatus.SKIPPED)

    @classmethod
    def failed(cls, error: StoreError) -> OperationResult:
        """Return a FAILED result carrying ``error``."""
        return cls(OperationStatus.FAILED, error)


@dataclasses.dataclass(slots=True)
class RepoDraft:
    """Transient add-form input held between user edits and ``add``."""

    provider: Provider = Provider.GITHUB
    owner: str = ""
    name: str = ""

    def clear(self) -> None:
        """Reset owner and name, keeping the chosen provider."""
        self.owner = ""
        self.name = ""
