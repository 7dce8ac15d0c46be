from __future__ import annotations

import logging


class RunIdFilter(logging.Filter):
    """
    Stamps `record.run_id` so every file line can be traced to one check run.

    Records that already carry a run id (passed via `extra=`) keep theirs.
    """

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "run_id", None):
            record.run_id = self.run_id
        return True
