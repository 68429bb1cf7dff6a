"""Console logging for the ``beancount-recorder`` command.

Library modules log through ``logging.getLogger(__name__)``; the package
logger carries a ``NullHandler`` (see ``__init__``) so nothing is printed
unless a host opts in. The CLI opts in through :func:`configure_logging`.
"""

from __future__ import annotations

import logging
import os
from typing import IO

LOG_LEVEL_ENV = "BEANCOUNT_RECORDER_LOG_LEVEL"
_HANDLER_NAME = "beancount_recorder.console"


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``$BEANCOUNT_RECORDER_LOG_LEVEL``) into a number.

    Unknown names raise ``ValueError``; nothing given means ``WARNING``.
    """

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.WARNING
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    if numeric is None:
        raise ValueError(f"unknown log level {level!r}")
    return numeric


def configure_logging(
    level: int | str | None = None, stream: IO[str] | None = None
) -> logging.Handler:
    """Send package log records at ``level`` and above to ``stream``.

    Calling it again swaps the console handler instead of adding a second one.
    """

    pkg_logger = logging.getLogger("beancount_recorder")
    for h in list(pkg_logger.handlers):
        if h.get_name() == _HANDLER_NAME:
            pkg_logger.removeHandler(h)
            h.close()

    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolve_level(level))
    pkg_logger.propagate = False
    return handler


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "resolve_level"]
