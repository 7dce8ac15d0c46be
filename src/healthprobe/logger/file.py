from __future__ import annotations

import logging
from pathlib import Path

from healthprobe.logger.context import RunIdFilter

FILE_FORMAT = "%(asctime)s | [%(levelname)s] | %(run_id)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_file_handler(logfile: Path, run_id: str) -> logging.FileHandler:
    """Per-run log file; captures every level the root logger lets through."""
    logfile.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(logfile, encoding="utf-8")
    handler.setLevel(logging.NOTSET)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RunIdFilter(run_id))
    return handler


def repoint_file_handler(
    handler: logging.FileHandler, new_logfile: Path, run_id: str
) -> None:
    """
    Move an existing handler to a new file (bootstrap log -> suite log) so
    that handlers are never stacked when logging is re-initialised.
    """
    new_logfile.parent.mkdir(parents=True, exist_ok=True)

    handler.acquire()
    try:
        handler.close()
        handler.baseFilename = str(new_logfile.resolve())
        handler.stream = handler._open()
        for f in handler.filters:
            if isinstance(f, RunIdFilter):
                f.run_id = run_id
    finally:
        handler.release()
