from __future__ import annotations

from healthprobe.stages.stage import Stage, StageReport, run_stage, stage

__all__ = ["Stage", "StageReport", "run_stage", "stage"]
