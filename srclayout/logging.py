"""Logging for srclayout: named loggers, CLI sinks and analysis diagnostics."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .models import ERROR, WARNING, Diagnostic

_LOGGER_NAME = "srclayout"
_CONSOLE_FORMAT = "[srclayout] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_SEVERITY_LEVELS = {WARNING: logging.WARNING, ERROR: logging.ERROR}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``srclayout`` or one of its children, e.g. ``srclayout.targets``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def log_diagnostic(logger: logging.Logger, diagnostic: Diagnostic) -> None:
    """Emit an analysis diagnostic at the level matching its severity."""
    level = _SEVERITY_LEVELS.get(diagnostic.severity, logging.WARNING)
    if diagnostic.path:
        logger.log(level, "%s: %s", diagnostic.path, diagnostic.message)
    else:
        logger.log(level, "%s", diagnostic.message)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route srclayout logs to stderr and, optionally, to ``log_file``.

    Handlers installed by an earlier call are replaced.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _sinks(log_file):
        handler.setLevel(level)
        logger.addHandler(handler)
    return logger


def _sinks(log_file: Path | None) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]
    if log_file is not None:
        file_sink = logging.FileHandler(log_file, encoding="utf-8")
        file_sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_sink)
    return handlers


__all__ = ["configure_logging", "get_logger", "log_diagnostic"]
