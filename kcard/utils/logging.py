"""Root logging for the card service and the embedded uvicorn server.

uvicorn is started with ``log_config=None``, so it installs no handlers of its
own; ``configure_root`` routes its loggers into the root handler and gives
them the service level. Per-request access lines stay at WARNING unless the
service runs at DEBUG.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Mapping, Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
_TRUTHY = {"1", "true", "yes", "on"}

LEVEL_ENV = "KCARD_LOG_LEVEL"
DEBUG_ENV = "KCARD_DEBUG"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error")
ACCESS_LOGGER = "uvicorn.access"


def resolve_level(environ: Optional[Mapping[str, str]] = None, default: int = logging.INFO) -> int:
    """Level from ``KCARD_LOG_LEVEL`` (name or number), else ``KCARD_DEBUG``, else ``default``."""
    env = os.environ if environ is None else environ
    raw = env.get(LEVEL_ENV, "").strip()
    if raw:
        if raw.isdigit():
            return int(raw)
        named = logging.getLevelName(raw.upper())
        if isinstance(named, int):
            return named
    if env.get(DEBUG_ENV, "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return default


def configure_root(
    default_level: int = logging.INFO,
    *,
    environ: Optional[Mapping[str, str]] = None,
    server_loggers: Iterable[str] = SERVER_LOGGERS,
    access_logger: Optional[str] = ACCESS_LOGGER,
) -> int:
    """Install the compact root handler and align the server loggers with it.

    Returns the effective level.
    """
    level = resolve_level(environ, default_level)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_FORMAT, datefmt=_DATEFMT)
    root.setLevel(level)

    for name in server_loggers:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(level)
    if access_logger:
        logging.getLogger(access_logger).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
    return level


__all__ = ["configure_root", "resolve_level"]
