"""Unit tests for structured store event logging."""

from __future__ import annotations

import pytest

from starwatch.backend import BackendCommandError, BackendTransportError
from starwatch.store import (
    LoadFailedError,
    MutationFailedError,
    RepoListStore,
    StoreConfig,
    StoreEventLogger,
    StoreEventType,
    observability,
)
from tests.helpers import make_setting, record_notices, seeded_backend


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        del stack_info
        self.calls.append((level, message, exc_info))
        return message

    def messages(self, event: StoreEventType) -> list[str]:
        return [message for _, message, _ in self.calls if event in message]


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> _FakeLogger:
    """Replace the observability module logger with a recorder."""
    logger = _FakeLogger()
    monkeypatch.setattr(observability, "logger", logger)
    return logger


class TestStoreEventLogger:
    """Tests for ``StoreEventLogger`` line formats."""

    def test_load_completed_is_info(self, fake_logger: _FakeLogger) -> None:
        """Load completion carries counts at INFO."""
        StoreEventLogger().log_load_completed(loaded=3, dropped=1)

        assert fake_logger.calls == [
            ("INFO", "[store.load.completed] loaded=3 dropped=1", None)
        ]

    def test_load_failed_carries_cause(self, fake_logger: _FakeLogger) -> None:
        """Load failures log the backend exception type and exc_info."""
        cause = BackendTransportError.timeout("read")
        error = LoadFailedError.from_backend(cause)

        StoreEventLogger().log_load_failed(error)

        level, message, exc_info = fake_logger.calls[0]
        assert level == "ERROR"
        assert StoreEventType.LOAD_FAILED in message
        assert "error_type=BackendTransportError" in message
        assert exc_info is cause

    def test_operation_skipped_is_warning(self, fake_logger: _FakeLogger) -> None:
        """Rejected input is logged at WARNING with the reason."""
        StoreEventLogger().log_operation_skipped(
            operation="add", reason="unknown provider 'github'"
        )

        assert fake_logger.calls == [
            (
                "WARNING",
                "[store.operation.skipped] operation=add "
                "reason=unknown provider 'github'",
                None,
            )
        ]

    def test_operation_failed_names_operation(
        self, fake_logger: _FakeLogger
    ) -> None:
        """Mutation failures name the operation and the backend error."""
        cause = BackendCommandError("update", "disk full")
        error = MutationFailedError("move", "a", cause=cause)

        StoreEventLogger().log_operation_failed(operation="move", error=error)

        level, message, _ = fake_logger.calls[0]
        assert level == "ERROR"
        assert "operation=move" in message
        assert "error_type=BackendCommandError" in message
        assert "disk full" in message

    def test_entry_dropped_is_warning(self, fake_logger: _FakeLogger) -> None:
        """Dropped entries are warnings, not errors."""
        StoreEventLogger().log_entry_dropped(reason="rate limited")

        assert fake_logger.calls[0][0] == "WARNING"
        assert "reason=rate limited" in fake_logger.calls[0][1]


@pytest.mark.asyncio
async def test_store_logs_load_and_operations(fake_logger: _FakeLogger) -> None:
    """The store reports loads, drops, conflicts and applied operations."""
    backend = seeded_backend(
        make_setting("a", 0, favourite=True),
        make_setting("b", 1, favourite=True),
        make_setting("c", 2),
    )
    backend.mark_unreadable("c")
    store = await RepoListStore.open(backend, config=StoreConfig(notice_ttl_s=60))

    await store.toggle_favourite("b")

    assert fake_logger.messages(StoreEventType.LOAD_ENTRY_DROPPED)
    assert fake_logger.messages(StoreEventType.LOAD_FAVOURITE_CONFLICT) == [
        "[store.load.favourite_conflict] demoted_setting_id=b"
    ]
    assert fake_logger.messages(StoreEventType.LOAD_COMPLETED) == [
        "[store.load.completed] loaded=2 dropped=1"
    ]
    assert fake_logger.messages(StoreEventType.OPERATION_APPLIED) == [
        "[store.operation.applied] operation=toggle_favourite setting_id=b"
    ]


@pytest.mark.asyncio
async def test_compensation_failure_is_logged(fake_logger: _FakeLogger) -> None:
    """A rejected compensating update is logged with the setting id."""
    backend = seeded_backend(
        make_setting("a", 0),
        make_setting("b", 1, favourite=True),
        failing_updates={2, 3},
    )
    store = await RepoListStore.open(backend, config=StoreConfig(notice_ttl_s=60))
    notices = record_notices(store.notifier)

    result = await store.toggle_favourite("a")

    assert not result.ok
    compensation = fake_logger.messages(StoreEventType.COMPENSATION_FAILED)
    assert len(compensation) == 1
    assert "setting_id=b" in compensation[0]
    assert len(notices) == 1,"Only the operation failure notifies"
