from __future__ import annotations

import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from rich.markup import escape

from healthprobe.branding import HEALTHPROBE_HEADER
from healthprobe.logger import get_logger
from healthprobe.pipeline import RunContext
from healthprobe.probes import ProbeDescriptor, ProbeOutcome, ProbeStatus, execute
from healthprobe.transport import Transport

log = get_logger("healthprobe.stage")


@dataclass(frozen=True)
class Stage:
    name: str
    probes: tuple[ProbeDescriptor, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "probes", tuple(self.probes))
        seen: set[str] = set()
        for p in self.probes:
            if p.name in seen:
                raise ValueError(f"Duplicate probe name in stage {self.name!r}: {p.name}")
            seen.add(p.name)


def stage(name: str, probes: Iterable[ProbeDescriptor]) -> Stage:
    return Stage(name=name, probes=tuple(probes))


@dataclass(frozen=True)
class StageReport:
    name: str
    outcomes: Mapping[str, ProbeOutcome]

    @classmethod
    def build(cls, name: str, outcomes: Mapping[str, ProbeOutcome]) -> "StageReport":
        return cls(name=name, outcomes=MappingProxyType(dict(outcomes)))

    def _count(self, status: ProbeStatus) -> int:
        return sum(1 for o in self.outcomes.values() if o.status is status)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def passed(self) -> int:
        return self._count(ProbeStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(ProbeStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(ProbeStatus.SKIPPED)

    def as_bools(self) -> dict[str, bool]:
        return {name: o.passed for name, o in self.outcomes.items()}


# ------------------------------------------------------------
# Execution
# ------------------------------------------------------------


def _log_outcome(i: int, name: str, outcome: ProbeOutcome) -> None:
    name = escape(name)
    if outcome.status is ProbeStatus.PASSED:
        log.info(f"{i}. {name}: [green]PASS[/green] {escape(outcome.message)}")
    elif outcome.status is ProbeStatus.SKIPPED:
        log.info(f"{i}. {name}: [yellow]SKIP[/yellow] ({escape(outcome.message)})")
    else:
        log.warning(f"{i}. {name}: [red]FAIL[/red] {escape(outcome.message)}")


def run_stage(
    stage: Stage,
    context: RunContext,
    transport: Transport,
    *,
    index: int = 1,
    total: int = 1,
    sleep: Callable[[float], None] = time.sleep,
    command_timeout: Optional[float] = None,
) -> StageReport:
    """
    Execute a stage's probes strictly in order.

    A probe's state delta is merged into the context before the next probe
    starts, so later probes in the same stage can depend on it. Failures never
    stop the stage; only declared dependencies cause skips.
    """
    log.info(HEALTHPROBE_HEADER(f"Stage {index}/{total}: {escape(stage.name)}").rstrip("\n"))

    outcomes: dict[str, ProbeOutcome] = {}
    for i, probe in enumerate(stage.probes, start=1):
        outcome = execute(
            probe, context, transport, command_timeout=command_timeout
        )
        outcomes[probe.name] = outcome
        _log_outcome(i, probe.name, outcome)

        if outcome.passed and outcome.state_delta:
            context.merge(outcome.state_delta)

        if probe.settle_seconds > 0 and not outcome.skipped:
            log.debug(f"Waiting {probe.settle_seconds}s for {escape(probe.name)} to settle")
            sleep(probe.settle_seconds)

    report = StageReport.build(stage.name, outcomes)
    log.info(
        f"Stage END: {escape(stage.name)} "
        f"({report.passed} passed, {report.failed} failed, {report.skipped} skipped)"
    )
    return report
