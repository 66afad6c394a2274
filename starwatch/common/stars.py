"""Compact star-count formatting for titles and listings."""

from __future__ import annotations

_DECIMAL_PREFIXES: tuple[str, ...] = ("k", "M", "G", "T", "P")
_STEP = 1000


def format_star_count(stars: int) -> str:
    """Render a star count with a decimal SI prefix and no fraction.

    Counts below 1000 are printed as-is.

    Examples
    --------
    >>> format_star_count(999)
    '999'
    >>> format_star_count(1234)
    '1k'
    >>> format_star_count(2_600_000)
    '3M'

    """
    if stars < _STEP:
        return str(stars)

    value = float(stars)
    prefix = ""
    for candidate in _DECIMAL_PREFIXES:
        if value < _STEP:
            break
        value /= _STEP
        prefix = candidate
    return f"{value:.0f}{prefix}"
