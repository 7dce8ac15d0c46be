from __future__ import annotations

from healthprobe.pipeline.run_context import RunContext

__all__ = ["RunContext"]
