from __future__ import annotations

import logging
import os
from pathlib import Path

from healthprobe.env import get_logging_env, new_run_id
from healthprobe.logger.console import build_console_handler
from healthprobe.logger.file import build_file_handler, repoint_file_handler
from healthprobe.logger.log_paths import target_log_file
from healthprobe.logger.retention import enforce_retention
from healthprobe.logger import state as _state

# Libraries whose DEBUG chatter drowns out probe lines.
_NOISY_LOGGERS = ("urllib3", "requests")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _target_paths() -> tuple[str, Path]:
    run_id = os.environ.get("HEALTHPROBE_RUN_ID") or new_run_id()
    os.environ["HEALTHPROBE_RUN_ID"] = run_id

    command = os.environ.get("HEALTHPROBE_COMMAND") or "bootstrap"
    suite = os.environ.get("HEALTHPROBE_SUITE") or None
    return run_id, target_log_file(command, suite, run_id)


def current_log_file() -> Path | None:
    return _state.LOG_FILE_PATH


def init_logging() -> None:
    """
    Configure the root logger for this process.

    Handlers live on the root logger only; `healthprobe.*` loggers propagate.
    Calling again after the run context changed moves the existing file
    handler to the new log file instead of adding a second one.
    """
    env = get_logging_env()
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    run_id, logfile = _target_paths()
    level = logging.DEBUG if env.verbose else _resolve_level(env.log_level)

    root = logging.getLogger()
    root.setLevel(level)

    if _state.INITIALIZED and _state.LOG_FILE_PATH == logfile:
        return

    file_handler = next(
        (h for h in root.handlers if isinstance(h, logging.FileHandler)), None
    )
    root.handlers.clear()

    if file_handler is None:
        file_handler = build_file_handler(logfile, run_id)
    else:
        repoint_file_handler(file_handler, logfile, run_id)
    root.addHandler(file_handler)

    if not env.quiet:
        root.addHandler(build_console_handler(level))

    # The current file exists by now, so pruning never removes it.
    enforce_retention(logfile.parent, env.log_retention)

    _state.INITIALIZED = True
    _state.RUN_ID = run_id
    _state.LOG_DIR = logfile.parent
    _state.LOG_FILE_PATH = logfile
