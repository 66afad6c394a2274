"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio

from starwatch.store import MutationPolicy, RepoListStore, StoreConfig
from tests.helpers import make_setting, seeded_backend

if typ.TYPE_CHECKING:
    from starwatch.backend.memory import InMemoryBackend


@pytest.fixture
def backend() -> InMemoryBackend:
    """Backend holding three settings; ``b`` is the favourite."""
    return seeded_backend(
        make_setting("a", 0),
        make_setting("b", 1, favourite=True),
        make_setting("c", 2),
    )


@pytest.fixture
def empty_backend() -> InMemoryBackend:
    """Backend with no persisted settings."""
    return seeded_backend()


@pytest.fixture(params=list(MutationPolicy), ids=lambda policy: policy.value)
def policy(request: pytest.FixtureRequest) -> MutationPolicy:
    """Run a test under each mutation policy."""
    return request.param


@pytest_asyncio.fixture
async def store(backend: InMemoryBackend) -> RepoListStore:
    """Store opened against ``backend`` with the default policy."""
    return await RepoListStore.open(backend, config=StoreConfig(notice_ttl_s=60))


@pytest_asyncio.fixture
async def policy_store(
    backend: InMemoryBackend, policy: MutationPolicy
) -> RepoListStore:
    """Store opened against ``backend`` with the parametrised policy."""
    return await RepoListStore.open(
        backend, config=StoreConfig(notice_ttl_s=60, mutation_policy=policy)
    )
