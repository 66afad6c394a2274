"""Typed tracking structures shared by the store and backend adapters."""

from __future__ import annotations

import dataclasses
import enum

import msgspec

from starwatch.common.slug import repo_slug


class Provider(enum.StrEnum):
    """Hosting service a tracked repository lives on."""

    GITHUB = "GitHub"
    GITLAB = "GitLab"


class Repo(msgspec.Struct, frozen=True, kw_only=True):
    """Repository identity on its hosting service.

    Attributes
    ----------
    provider : Provider
        Hosting service. Serialised as ``git_type``.
    owner : str
        Owner, organisation or (for GitLab) group path.
    name : str
        Repository name.

    """

    provider: Provider = msgspec.field(name="git_type")
    owner: str
    name: str

    @property
    def slug(self) -> str:
        """Return the ``owner/name`` identifier."""
        return repo_slug(self.owner, self.name)


class TrackedSetting(msgspec.Struct, frozen=True, kw_only=True):
    """Persisted identity and preferences for one tracked repository.

    Attributes
    ----------
    id : str
        Opaque backend-issued identifier; never changes.
    order : int
        Historical insertion index used as the secondary sort key. Values are
        not contiguous once entries have been deleted.
    favourite : bool
        Whether this entry is pinned to the top of the list.
    repo : Repo
        The tracked repository.

    """

    id: str
    order: int
    favourite: bool
    repo: Repo

    def with_favourite(self, favourite: bool) -> TrackedSetting:  # noqa: FBT001
        """Return a copy with the favourite flag replaced."""
        return msgspec.structs.replace(self, favourite=favourite)

    def with_order(self, order: int) -> TrackedSetting:
        """Return a copy with the order replaced."""
        return msgspec.structs.replace(self, order=order)


class FetchedEntry(msgspec.Struct, frozen=True, kw_only=True):
    """List element: a tracked setting with its point-in-time star count."""

    setting: TrackedSetting
    stars: int

    @property
    def id(self) -> str:
        """Return the setting identifier."""
        return self.setting.id

    def with_setting(self, setting: TrackedSetting) -> FetchedEntry:
        """Return a copy carrying ``setting`` and the same star count."""
        return msgspec.structs.replace(self, setting=setting)


@dataclasses.dataclass(frozen=True, slots=True)
class ReadOk:
    """Successfully read entry from the backend ``read`` command."""

    value: FetchedEntry


@dataclasses.dataclass(frozen=True, slots=True)
class ReadErr:
    """Entry the backend could not read or resolve."""

    message: str


type ReadResult = ReadOk | ReadErr
