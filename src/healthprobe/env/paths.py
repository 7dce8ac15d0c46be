from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

# src/healthprobe/env/paths.py -> project root is the parent of src/
PROJECT_ROOT = Path(__file__).resolve().parents[3]

CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_LOGS_DIR = PROJECT_ROOT / "logs"

RUN_ID_FORMAT = "%Y-%m-%d_%H-%M-%S"


def new_run_id() -> str:
    return datetime.now().strftime(RUN_ID_FORMAT)


def _ensure(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Log layout: logs/<command>/[<suite>/]<command>-<run_id>.log
# ---------------------------------------------------------------------


def logs_dir() -> Path:
    """Root of all run logs; HEALTHPROBE_LOGS_DIR moves it (tests, CI)."""
    override = os.environ.get("HEALTHPROBE_LOGS_DIR", "").strip()
    if override:
        return _ensure(Path(override).expanduser().resolve())
    return _ensure(DEFAULT_LOGS_DIR)


def module_logs_dir(command: str) -> Path:
    return _ensure(logs_dir() / command)


def suite_logs_dir(command: str, suite: str) -> Path:
    return _ensure(logs_dir() / command / suite)
