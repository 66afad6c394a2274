"""Starwatch: track GitHub and GitLab repositories and their star counts.

The package holds the client side of a desktop star tracker. Persistence and
star lookups live in a separate backend process reached through
:mod:`starwatch.backend`; :mod:`starwatch.store` keeps the in-memory list the
UI renders.
"""

from __future__ import annotations

__version__ = "0.1.0"
