"""Logging for ``budget_insights``.

Library modules log through :func:`get_logger` and stay silent until a host
calls :func:`configure_logging`; the CLI does so in its root callback.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from .config import LOG_LEVEL_ENV

_ROOT_LOGGER = "budget_insights"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Handler installed by configure_logging; None until then.
_handler: logging.Handler | None = None


def _level_from_str(value: str) -> int | None:
    s = value.strip().upper()
    if s.isdigit():
        return int(s)
    numeric = getattr(logging, s, None)
    return numeric if isinstance(numeric, int) else None


def resolve_level(level: int | str | None) -> int:
    """Explicit level, else ``BUDGET_INSIGHTS_LOG_LEVEL``, else INFO.

    Unrecognized level names are skipped rather than rejected.
    """

    for candidate in (level, os.getenv(LOG_LEVEL_ENV)):
        if isinstance(candidate, int):
            return candidate
        if candidate:
            parsed = _level_from_str(candidate)
            if parsed is not None:
                return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send package log records to ``stream`` (stderr by default).

    Only the first call has an effect.
    """

    global _handler
    if _handler is not None:
        return

    logger = logging.getLogger(_ROOT_LOGGER)
    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.setLevel(resolve_level(level))
    logger.addHandler(_handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(_ROOT_LOGGER)
    if _handler is None and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "resolve_level"]
