"""Logging utilities tailored for ladder solving."""

from __future__ import annotations

import logging
from typing import IO, Optional, Union

ROOT_LOGGER = "crossclimb"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def resolve_level(level: Union[int, str]) -> int:
    """Accept ``logging.INFO`` or a name such as ``"debug"``; unknown names fall back to INFO."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO, stream: Optional[IO[str]] = None) -> None:
    """Route all records to one handler on ``stream`` (stderr by default).

    The orchestrator may run several candidate rounds per request, so each
    line carries the module name to tell generation, validation and search
    apart. Calling this again replaces the previous handler.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``crossclimb`` namespace, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
