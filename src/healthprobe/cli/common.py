from __future__ import annotations

import argparse
from collections import deque
from pathlib import Path

from rich import box
from rich.table import Table

from healthprobe.env import logs_dir
from healthprobe.cli.render import RENDER


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    `healthprobe <cmd> help [sub ...]` prints the help of the deepest subparser named.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args([*path, "--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Log files
# ----------------------------


def resolve_log_dir(*, command: str, suite: str | None, explicit: str | None) -> Path:
    if explicit:
        return Path(explicit).expanduser().resolve()
    base = logs_dir() / command
    return base / suite if suite else base


def iter_log_files(log_dir: Path) -> list[Path]:
    """Log files directly under `log_dir`, newest first."""
    if not log_dir.is_dir():
        return []
    files = [p for p in log_dir.glob("*.log") if p.is_file()]
    return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)


def find_log_file(log_dir: Path, name: str) -> Path | None:
    stem = name[: -len(".log")] if name.endswith(".log") else name
    return next((p for p in iter_log_files(log_dir) if p.stem == stem), None)


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def print_tail(path: Path, lines: int) -> None:
    try:
        text = read_text(path)
    except OSError as e:
        RENDER.print(f"[red]error reading log[/red] {e}")
        return

    all_lines = text.splitlines()
    tail = deque(all_lines, maxlen=lines) if lines > 0 else all_lines
    for line in tail:
        RENDER.print(line, markup=False, highlight=False)


def infer_run_status(path: Path) -> str:
    """
    A finished check writes RUN_STATUS=<tier> as its last line; a log without
    the marker belongs to an interrupted run or a non-check command.
    """
    try:
        lines = read_text(path).splitlines()
    except OSError:
        return "unknown"

    for line in reversed(lines):
        _, marker, value = line.partition("RUN_STATUS=")
        if marker:
            return value.strip()
    return "unknown"


# ----------------------------
# Tables
# ----------------------------


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    if not rows:
        RENDER.print("(no results)")
        return

    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
    for h in headers:
        table.add_column(h, overflow="fold")
    for row in rows:
        table.add_row(*(str(c) for c in row))
    RENDER.print(table)
