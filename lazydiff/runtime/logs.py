"""Logging setup: silent by default, optional rotating log file."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "lazydiff"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(log_file: Path | None, debug: bool = False) -> Path | None:
    """Attach a ``RotatingFileHandler`` to the package logger.

    Without ``log_file`` nothing is emitted: the terminal belongs to the UI.
    Calling twice with the same file does not add a second handler.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if log_file is None:
        return None

    log_file = log_file.expanduser()
    resolved = log_file.resolve()
    for handler in package_logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename).resolve() == resolved:
            return log_file

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=2 * 1024 * 1024,
        backupCount=2,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(file_handler)
    package_logger.info("logging to %s", log_file)
    return log_file
