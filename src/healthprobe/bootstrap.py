"""
bootstrap.py

Process setup for healthprobe, in two steps. Both write os.environ, which is
where every other module reads its configuration from; nothing else may.

1) bootstrap_base_env(): once, at the entrypoint. Loads config/.env and fixes
   the run id for this process and any child it spawns.
2) bootstrap_run_context(): after argparse, before init_logging(). Records the
   command and suite so log paths and env snapshots agree on them.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from healthprobe.env import CONFIG_DIR, new_run_id, reset_env_caches

_base_loaded = False


def bootstrap_base_env(dotenv_path: Path | None = None) -> None:
    global _base_loaded
    if _base_loaded:
        return

    path = dotenv_path or CONFIG_DIR / ".env"
    if path.is_file():
        # Variables already set in the real environment win over the file.
        load_dotenv(path, override=False)

    os.environ.setdefault("HEALTHPROBE_RUN_ID", new_run_id())

    reset_env_caches()
    _base_loaded = True


def _stamp_flag(name: str, value: bool | None) -> None:
    if value is not None:
        os.environ[name] = "1" if value else "0"


def bootstrap_run_context(
    *,
    command: str,
    suite: str | None = None,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    os.environ["HEALTHPROBE_COMMAND"] = command

    if suite:
        os.environ["HEALTHPROBE_SUITE"] = suite
    else:
        # A suite inherited from a parent process belongs to another run.
        os.environ.pop("HEALTHPROBE_SUITE", None)

    _stamp_flag("HEALTHPROBE_VERBOSE", verbose)
    _stamp_flag("HEALTHPROBE_QUIET", quiet)

    reset_env_caches()
