"""femtologging setup and percent-style log helpers.

Modules obtain a logger with ``get_logger(__name__)`` and log through the
``log_*`` helpers, which interpolate the message before femtologging sees it.
The root level is read from ``STARWATCH_LOG_LEVEL``.

Example:
>>> from starwatch.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Loaded %d entries", 3)

"""

from __future__ import annotations

import os
import typing as typ

from femtologging import basicConfig, get_logger

LOG_LEVEL_ENV_VAR = "STARWATCH_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

_KNOWN_LEVELS = frozenset(
    {"TRACE", "DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL"}
)


class _SupportsLog(typ.Protocol):
    """Anything with femtologging's ``log`` signature."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Upper-case ``level`` and report whether it had to be replaced.

    Returns
    -------
    tuple[str, bool]
        The level to apply and ``True`` when ``level`` was empty or unknown,
        in which case the level is ``INFO``.

    """
    candidate = (level or "").strip().upper()
    if candidate in _KNOWN_LEVELS:
        return candidate, False
    return DEFAULT_LOG_LEVEL, True


def configure_logging(level: str | None = None, *, force: bool = False) -> str:
    """Apply a root log level and return it.

    Parameters
    ----------
    level : str | None, optional
        Level to apply. ``None`` reads ``STARWATCH_LOG_LEVEL``; unset means
        INFO. Unknown values also fall back to INFO and log a warning.
    force : bool, optional
        Replace handlers configured by an earlier call.

    Returns
    -------
    str
        The level passed to femtologging.

    """
    raw = os.environ.get(LOG_LEVEL_ENV_VAR) if level is None else level
    applied, invalid = normalize_log_level(raw)
    basicConfig(level=applied, force=force)
    if invalid and raw:
        log_warning(
            get_logger(__name__),
            "Ignoring %s=%r; using %s",
            LOG_LEVEL_ENV_VAR,
            raw,
            applied,
        )
    return applied


def format_log_message(template: str, *args: object) -> str:
    """Interpolate ``args`` into ``template`` with ``%`` formatting."""
    return template % args


def _emit(
    logger: _SupportsLog,
    level: str,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    logger.log(
        level,
        format_log_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at DEBUG."""
    _emit(logger, "DEBUG", template, args, exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at INFO."""
    _emit(logger, "INFO", template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at WARNING."""
    _emit(logger, "WARNING", template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at ERROR, optionally attaching ``exc_info``."""
    _emit(logger, "ERROR", template, args, exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log a pre-formatted ERROR message with ``exc`` as exc_info."""
    logger.log("ERROR", message, exc_info=exc, stack_info=False)


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVEL_ENV_VAR",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
