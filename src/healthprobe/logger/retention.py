from __future__ import annotations

import logging
from pathlib import Path


def enforce_retention(log_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest `keep` log files; returns what was removed."""
    if keep <= 0:
        return []

    logs = sorted(
        log_dir.glob("*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )

    removed: list[Path] = []
    for old in logs[keep:]:
        try:
            old.unlink()
        except OSError as e:
            logging.getLogger(__name__).debug(f"Could not prune {old}: {e}")
            continue
        removed.append(old)
    return removed
