"""Mini README: Application-wide logging helpers for the dispatch controller.

Structure:
    * configure_root_logger - attach the shared formatter to the root logger
      once and apply an explicitly requested level on every call.
    * get_logger - factory returning module loggers with baseline configuration.

Usage:
    Modules declare ``LOGGER = get_logger(__name__)``, which attaches the
    handler at INFO the first time any module is imported. The CLI later calls
    ``configure_root_logger`` with the level from the settings; that call only
    changes the root level, so the handler is never attached twice when
    uvicorn reloads the application.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger with the dispatch controller formatter.

    ``level`` defaults to INFO on first use; when omitted on later calls the
    current root level is left untouched.
    """

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if _LOGGER_INITIALISED:
        if level is not None:
            root_logger.setLevel(_resolve_level(level))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.setLevel(_resolve_level(logging.INFO if level is None else level))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
