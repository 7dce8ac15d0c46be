from __future__ import annotations

from pathlib import Path

from healthprobe.env import module_logs_dir, suite_logs_dir


def target_log_dir(command: str, suite: str | None) -> Path:
    return suite_logs_dir(command, suite) if suite else module_logs_dir(command)


def target_log_file(command: str, suite: str | None, run_id: str) -> Path:
    return target_log_dir(command, suite) / f"{command}-{run_id}.log"
