"""Unit tests for removing repositories from the list."""

from __future__ import annotations

import typing as typ

import pytest

from starwatch.store import MutationFailedError, OperationStatus
from tests.helpers import entry_ids, record_notices, stored_favourites

if typ.TYPE_CHECKING:
    from starwatch.backend.memory import InMemoryBackend
    from starwatch.store import RepoListStore


class TestDelete:
    """Tests for ``RepoListStore.delete``."""

    @pytest.mark.asyncio
    async def test_delete_removes_entry_and_keeps_orders(
        self, store: RepoListStore, backend: InMemoryBackend
    ) -> None:
        """Remaining entries keep their order values."""
        result = await store.delete("a")

        assert result.status is OperationStatus.APPLIED
        assert entry_ids(store.entries) == ["b", "c"]
        assert [e.setting.order for e in store.entries] == [1, 2]
        assert backend.commands() == ["read", "delete"]
        assert "a" not in backend.settings

    @pytest.mark.asyncio
    async def test_deleting_favourite_demotes_first(
        self, store: RepoListStore, backend: InMemoryBackend
    ) -> None:
        """A favourite is un-flagged with update, then deleted."""
        result = await store.delete("b")

        assert result.ok
        assert entry_ids(store.entries) == ["a", "c"]
        assert store.favourite is None
        assert backend.commands() == ["read", "update", "delete"]
        update_call, delete_call = backend.calls[1], backend.calls[2]
        assert update_call.setting is not None
        assert update_call.setting.favourite is False
        assert delete_call.setting == update_call.setting
        assert stored_favourites(backend) == []

    @pytest.mark.asyncio
    async def test_unknown_id_is_a_no_op(
        self, store: RepoListStore, backend: InMemoryBackend
    ) -> None:
        """Deleting an id missing from the list is skipped."""
        result = await store.delete("zzz")

        assert result.status is OperationStatus.SKIPPED
        assert backend.commands() == ["read"]


class TestDeleteFailures:
    """Failure handling for deletes."""

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_entry(
        self, policy_store: RepoListStore, backend: InMemoryBackend
    ) -> None:
        """A rejected delete leaves the list as it was."""
        before = policy_store.entries
        notices = record_notices(policy_store.notifier)
        backend.fail_next("delete", "locked")

        result = await policy_store.delete("c")

        assert result.status is OperationStatus.FAILED
        assert isinstance(result.error, MutationFailedError)
        assert result.error.operation == "delete"
        assert policy_store.entries == before
        assert "c" in backend.settings
        assert len(notices) == 1

    @pytest.mark.asyncio
    async def test_failed_delete_of_favourite_restores_flag(
        self, policy_store: RepoListStore, backend: InMemoryBackend
    ) -> None:
        """The persisted demotion is reverted when delete fails."""
        before = policy_store.entries
        backend.fail_next("delete")

        result = await policy_store.delete("b")

        assert result.status is OperationStatus.FAILED
        assert policy_store.entries == before
        assert backend.commands() == ["read", "update", "delete", "update"]
        assert stored_favourites(backend) == ["b"]

    @pytest.mark.asyncio
    async def test_failed_demotion_skips_delete(
        self, policy_store: RepoListStore, backend: InMemoryBackend
    ) -> None:
        """No delete is sent when demoting the favourite fails."""
        backend.fail_next("update")

        result = await policy_store.delete("b")

        assert result.status is OperationStatus.FAILED
        assert backend.commands() == ["read", "update"]
        assert "b" in backend.settings
