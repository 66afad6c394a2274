"""Repository slug utilities.

Slugs identify a repository on its hosting service in ``owner/name`` format.
GitLab owners may contain nested groups (``group/subgroup``), so parsing
splits on the last ``/`` only.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug from owner and name.

    Examples
    --------
    >>> repo_slug("octo", "cat")
    'octo/cat'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into owner and name.

    Parameters
    ----------
    slug:
        Repository slug in ``owner/name`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the slug has no ``/`` or either side is empty.

    Examples
    --------
    >>> parse_repo_slug("gitlab-org/gitlab")
    ('gitlab-org', 'gitlab')
    >>> parse_repo_slug("group/subgroup/project")
    ('group/subgroup', 'project')

    """
    owner, sep, name = slug.strip().rpartition("/")
    if not sep or not owner or not name:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    return owner, name
