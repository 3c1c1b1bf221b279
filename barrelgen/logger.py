"""Logger capability consumed by generation sessions.

A session only needs four channels. Editors and tests pass their own object;
the command line uses ``LoggingLogger`` on top of the ``logging`` module.
"""

from __future__ import annotations

import logging
import sys
from typing import Protocol

LOGGER_NAME = "barrelgen"


class GenerationLogger(Protocol):
    def log(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def done(self, message: str) -> None: ...


class LoggingLogger:
    """``GenerationLogger`` that forwards each channel to a stdlib logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger(LOGGER_NAME)

    def log(self, message: str) -> None:
        self._logger.info(message)

    def warn(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def done(self, message: str) -> None:
        self._logger.info(message)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route the package logger to stderr with bare messages.

    ``quiet`` keeps only errors; ``verbose`` also enables debug output.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False


__all__ = ["LOGGER_NAME", "GenerationLogger", "LoggingLogger", "configure_logging"]
