from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from healthprobe.branding import HEALTHPROBE_SECTION_END
from healthprobe.logger import get_logger
from healthprobe.pipeline import RunContext
from healthprobe.stages import Stage, StageReport, run_stage
from healthprobe.transport import Transport

log = get_logger("healthprobe.runner")


class Tier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_ATTENTION = "needs attention"


EXCELLENT_RATIO = 0.8
GOOD_RATIO = 0.6


def tier_for_ratio(ratio: float) -> Tier:
    # Lower bounds are inclusive.
    if ratio >= EXCELLENT_RATIO:
        return Tier.EXCELLENT
    if ratio >= GOOD_RATIO:
        return Tier.GOOD
    return Tier.NEEDS_ATTENTION


@dataclass(frozen=True)
class StageAbort:
    stage: str
    error: str


@dataclass(frozen=True)
class FinalReport:
    stages: tuple[StageReport, ...]
    total: int
    passed: int
    tier: Tier
    context: Mapping[str, Any]
    aborted: Optional[StageAbort] = None

    @property
    def ratio(self) -> float:
        return self.passed / self.total if self.total else 0.0

    @property
    def percent(self) -> int:
        return round(self.ratio * 100)

    @property
    def skipped(self) -> int:
        return sum(s.skipped for s in self.stages)

    @property
    def failed(self) -> int:
        return sum(s.failed for s in self.stages)


def build_report(
    reports: Iterable[StageReport],
    context: RunContext,
    aborted: Optional[StageAbort] = None,
) -> FinalReport:
    stages = tuple(reports)
    # Skipped probes count toward total but never toward passed.
    total = sum(s.total for s in stages)
    passed = sum(s.passed for s in stages)
    ratio = passed / total if total else 0.0

    return FinalReport(
        stages=stages,
        total=total,
        passed=passed,
        tier=tier_for_ratio(ratio),
        context=MappingProxyType(dict(context.snapshot())),
        aborted=aborted,
    )


def run_all(
    stages: Iterable[Stage],
    transport: Transport,
    *,
    seed: Optional[Mapping[str, Any]] = None,
    sleep: Callable[[float], None] = time.sleep,
    command_timeout: Optional[float] = None,
) -> FinalReport:
    """
    Run stages in order against one fresh RunContext and build the report.

    A stage that raises past its own probe handling stops the run; the report
    then covers the stages that completed and names the aborted one.
    """
    plan = list(stages)
    context = RunContext(seed)

    reports: list[StageReport] = []
    aborted: Optional[StageAbort] = None

    for i, stage in enumerate(plan, start=1):
        try:
            report = run_stage(
                stage,
                context,
                transport,
                index=i,
                total=len(plan),
                sleep=sleep,
                command_timeout=command_timeout,
            )
        except Exception as e:
            log.exception(f"Stage {stage.name} aborted")
            aborted = StageAbort(stage=stage.name, error=f"{type(e).__name__}: {e}")
            break

        reports.append(report)

    log.info(HEALTHPROBE_SECTION_END().rstrip("\n"))
    return build_report(reports, context, aborted)
