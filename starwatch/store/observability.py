"""Emit structured observability events for repository list operations.

``RepoListStore`` reports loads, committed mutations, failures and
compensation problems through ``StoreEventLogger``. Lines use the
``[event] key=value`` layout so they can be grepped or parsed.

Usage
-----
>>> event_logger = StoreEventLogger()
>>> event_logger.log_load_completed(loaded=3, dropped=1)

"""

from __future__ import annotations

import enum
import typing as typ

from starwatch.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from starwatch.store.errors import StoreError

logger = get_logger(__name__)


class StoreEventType(enum.StrEnum):
    """Structured log event types for store operations."""

    LOAD_COMPLETED = "store.load.completed"
    LOAD_ENTRY_DROPPED = "store.load.entry_dropped"
    LOAD_FAILED = "store.load.failed"
    LOAD_FAVOURITE_CONFLICT = "store.load.favourite_conflict"
    OPERATION_APPLIED = "store.operation.applied"
    OPERATION_SKIPPED = "store.operation.skipped"
    OPERATION_FAILED = "store.operation.failed"
    COMPENSATION_FAILED = "store.compensation.failed"


class StoreEventLogger:
    """Emit structured store events via femtologging."""

    def log_load_completed(self, *, loaded: int, dropped: int) -> None:
        """Log a successful load with entry counts."""
        log_info(
            logger,
            "[%s] loaded=%d dropped=%d",
            StoreEventType.LOAD_COMPLETED,
            loaded,
            dropped,
        )

    def log_entry_dropped(self, *, reason: str) -> None:
        """Log one unreadable entry skipped during a load."""
        log_warning(
            logger,
            "[%s] reason=%s",
            StoreEventType.LOAD_ENTRY_DROPPED,
            reason,
        )

    def log_favourite_conflict(self, *, setting_id: str) -> None:
        """Log a loaded favourite that was demoted because another came first."""
        log_warning(
            logger,
            "[%s] demoted_setting_id=%s",
            StoreEventType.LOAD_FAVOURITE_CONFLICT,
            setting_id,
        )

    def log_load_failed(self, error: StoreError) -> None:
        """Log a ``read`` failure that left the list unchanged."""
        log_error(
            logger,
            "[%s] error_type=%s error_message=%s",
            StoreEventType.LOAD_FAILED,
            type(error.cause or error).__name__,
            str(error),
            exc_info=error.cause,
        )

    def log_operation_applied(self, *, operation: str, setting_id: str) -> None:
        """Log a committed mutation."""
        log_info(
            logger,
            "[%s] operation=%s setting_id=%s",
            StoreEventType.OPERATION_APPLIED,
            operation,
            setting_id,
        )

    def log_operation_skipped(self, *, operation: str, reason: str) -> None:
        """Log input rejected before any backend call."""
        log_warning(
            logger,
            "[%s] operation=%s reason=%s",
            StoreEventType.OPERATION_SKIPPED,
            operation,
            reason,
        )

    def log_operation_failed(self, *, operation: str, error: StoreError) -> None:
        """Log a mutation that failed and left the list unchanged.

        Parameters
        ----------
        operation
            Store operation name (``add``, ``toggle_favourite``...).
        error
            Store error carrying the backend exception as ``cause``.

        """
        log_error(
            logger,
            "[%s] operation=%s error_type=%s error_message=%s",
            StoreEventType.OPERATION_FAILED,
            operation,
            type(error.cause or error).__name__,
            str(error),
            exc_info=error.cause,
        )

    def log_compensation_failed(
        self, *, setting_id: str, error: BaseException
    ) -> None:
        """Log a compensating ``update`` that the backend also refused."""
        log_error(
            logger,
            "[%s] setting_id=%s error_type=%s error_message=%s",
            StoreEventType.COMPENSATION_FAILED,
            setting_id,
            type(error).__name__,
            str(error),
            exc_info=error,
        )
