"""Command-line host for the tracked repository list.

Usage:
    starwatch list                       # Show tracked repositories
    starwatch add octo/cat               # Track a GitHub repository
    starwatch add gitlab-org/gitlab --provider GitLab
    starwatch favourite <id>             # Toggle the favourite flag
    starwatch move <id> up               # Reorder a non-favourite entry
    starwatch delete <id>                # Stop tracking an entry
    starwatch refresh                    # Reload star counts

Environment variables:
    STARWATCH_BACKEND            - ``http`` (default) or ``memory``
    STARWATCH_BACKEND_URL        - Base URL of the backend command endpoint
    STARWATCH_BACKEND_TIMEOUT_S  - Per-command timeout in seconds
    STARWATCH_MUTATION_POLICY    - ``confirm`` (default) or ``optimistic``
    STARWATCH_NOTICE_TTL_S       - Seconds an error notice stays visible
    STARWATCH_DEFAULT_PROVIDER   - Provider used by ``add`` (default GitHub)
    STARWATCH_LOG_LEVEL          - Log level (default INFO)
"""

from __future__ import annotations

import asyncio
import sys
import typing as typ

from cyclopts import App, Parameter

from starwatch import __version__
from starwatch.backend.errors import BackendConfigError
from starwatch.backend.factory import create_backend
from starwatch.common.slug import parse_repo_slug
from starwatch.common.stars import format_star_count
from starwatch.logging import configure_logging, get_logger, log_exception
from starwatch.store.config import StoreConfig
from starwatch.store.models import OperationStatus
from starwatch.store.service import RepoListStore
from starwatch.tracking.models import Provider

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from starwatch.store.models import OperationResult
    from starwatch.tracking.models import FetchedEntry

logger = get_logger(__name__)

app = App(
    name="starwatch",
    help="Track repository star counts",
    version=__version__,
)

type StoreAction = cabc.Callable[[RepoListStore], cabc.Awaitable[OperationResult]]


def format_entry(entry: FetchedEntry) -> str:
    """Render one entry as a listing line."""
    setting = entry.setting
    marker = "♥" if setting.favourite else " "
    return (
        f"{marker} {setting.repo.provider.value:<6} {setting.repo.slug:<40} "
        f"{entry.stars:>8} ★  id={setting.id}"
    )


def favourite_title(entry: FetchedEntry) -> str:
    """Render the compact favourite headline, e.g. ``⭐️ cat 1k``."""
    return f"⭐️ {entry.setting.repo.name} {format_star_count(entry.stars)}"


def _print_entries(store: RepoListStore) -> None:
    favourite = store.favourite
    if favourite is not None:
        print(favourite_title(favourite))
    if not store.entries:
        print("No repositories tracked.")
        return
    for entry in store.entries:
        print(format_entry(entry))


async def _run(action: StoreAction | None) -> int:
    try:
        config = StoreConfig.from_env()
        backend = create_backend()
    except (BackendConfigError, ValueError) as exc:
        log_exception(logger, "Invalid starwatch configuration", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        store = await RepoListStore.open(backend, config=config)
        notice = store.notifier.active
        if notice is not None:
            print(f"error: {notice.message}", file=sys.stderr)
            return 1

        if action is not None:
            result = await action(store)
            if result.status is OperationStatus.FAILED:
                print(f"error: {result.error}", file=sys.stderr)
                return 1
            if result.status is OperationStatus.SKIPPED:
                print("Nothing to do.")

        _print_entries(store)
        return 0
    finally:
        aclose = getattr(backend, "aclose", None)
        if aclose is not None:
            await aclose()


@app.command(name="list")
def list_entries() -> int:
    """Show tracked repositories, favourite first.

    Returns:
        Exit code (0 for success, 1 when the backend cannot be read).

    """
    return asyncio.run(_run(None))


@app.command
def refresh() -> int:
    """Reload settings and star counts from the backend.

    Returns:
        Exit code (0 for success, 1 when the backend cannot be read).

    """
    return asyncio.run(_run(lambda store: store.refresh()))


@app.command
def add(
    slug: str,
    *,
    provider: typ.Annotated[
        Provider, Parameter(env_var="STARWATCH_DEFAULT_PROVIDER")
    ] = Provider.GITHUB,
) -> int:
    """Track a repository given as ``owner/name``.

    Args:
        slug: Repository in ``owner/name`` form.
        provider: Hosting service of the repository.

    Returns:
        Exit code (0 for success, 1 when the backend rejects the repository).

    """
    try:
        owner, name = parse_repo_slug(slug)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return asyncio.run(_run(lambda store: store.add(provider, owner, name)))


@app.command
def favourite(setting_id: str) -> int:
    """Toggle the favourite flag of a tracked entry.

    Args:
        setting_id: Identifier shown by ``starwatch list``.

    """
    return asyncio.run(_run(lambda store: store.toggle_favourite(setting_id)))


@app.command
def move(setting_id: str, direction: typ.Literal["up", "down"]) -> int:
    """Swap a non-favourite entry with its neighbour.

    Args:
        setting_id: Identifier shown by ``starwatch list``.
        direction: ``up`` or ``down``.

    """
    offset = -1 if direction == "up" else 1
    return asyncio.run(_run(lambda store: store.move(setting_id, offset)))


@app.command
def delete(setting_id: str) -> int:
    """Stop tracking an entry.

    Args:
        setting_id: Identifier shown by ``starwatch list``.

    """
    return asyncio.run(_run(lambda store: store.delete(setting_id)))


def main() -> int:
    """Entry point for the CLI."""
    configure_logging()
    return app()


if __name__ == "__main__":
    sys.exit(main())
