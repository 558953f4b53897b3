# === FILE: site_tour/logger.py ===
"""Project logger for SiteTour.

Every module logs through the one ``"SiteTour"`` logger::

    from site_tour.logger import logger
    logger.info("found: %s", url)

Console records go to stderr, so a JSON report printed on stdout stays
parseable. The CLI calls :func:`init_logging` once per invocation to apply
``--log-level``, ``--log-file`` and ``--log-format``.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

LOGGER_NAME: Final[str] = "SiteTour"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_FILE_BACKUPS: Final[int] = 3

LevelT = Union[int, str]


def _build_handlers(log_file: str | Path | None, fmt: str) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=_LOG_FILE_MAX_BYTES,
                backupCount=_LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and handlers of the SiteTour logger and return it.

    With *replace_handlers* the previous handlers are detached and closed
    first; otherwise the new ones are added next to them. A *log_file*
    adds a size-rotated file next to the stderr console.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    for handler in _build_handlers(log_file, log_format):
        lg.addHandler(handler)

    lg.propagate = False
    return lg


def init_logging(
    level: LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """CLI entry: reconfigure from scratch."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME"]
