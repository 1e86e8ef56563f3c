"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(threadName)s] %(message)s"


def configure_logging(
    *,
    level: int = logging.INFO,
    log_file: Path | None = None,
    force: bool = False,
) -> None:
    """Send records at ``level`` to stderr and, when given, everything to ``log_file``.

    The file always receives DEBUG output so a failed sync can be diagnosed after the
    fact without rerunning it verbosely.
    """

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    handlers[0].setLevel(level)
    handlers[0].setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file is not None else level,
        handlers=handlers,
        force=force,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(level if level <= logging.DEBUG else logging.WARNING)
