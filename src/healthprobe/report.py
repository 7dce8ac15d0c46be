"""
report.py

Presentation of a FinalReport: log rendering, JSON view, exit code.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from rich.markup import escape

from healthprobe.branding import HEALTHPROBE_HEADER, SYMBOLS
from healthprobe.probes import ProbeStatus
from healthprobe.probes.templating import render
from healthprobe.runner import FinalReport, Tier
from healthprobe.suites import Link

_TIER_MESSAGES = {
    Tier.EXCELLENT: "EXCELLENT! The service is running successfully!",
    Tier.GOOD: "GOOD! Most features are working correctly.",
    Tier.NEEDS_ATTENTION: "NEEDS ATTENTION: Several components need fixing.",
}

_STATUS_LABELS = {
    ProbeStatus.PASSED: f"[green]{SYMBOLS.PASS} PASS[/green]",
    ProbeStatus.FAILED: f"[red]{SYMBOLS.FAIL} FAIL[/red]",
    ProbeStatus.SKIPPED: f"[yellow]{SYMBOLS.SKIP} SKIP[/yellow]",
}

RAW_PREVIEW = 200


def tier_message(tier: Tier) -> str:
    return _TIER_MESSAGES[tier]


def exit_code_for(report: FinalReport) -> int:
    return 0 if report.tier is Tier.EXCELLENT and report.aborted is None else 1


def resolve_links(
    links: Iterable[Link], base_url: str, report: FinalReport
) -> list[tuple[str, str]]:
    values = dict(report.context)
    values["issuedId"] = values.get("issuedId") or "YOUR_ID"
    return [(link.label, f"{base_url}{render(link.path, values)}") for link in links]


def next_steps(report: FinalReport) -> list[str]:
    """One line per probe that needs a look, in run order."""
    steps: list[str] = []
    for stage in report.stages:
        for name, outcome in stage.outcomes.items():
            if outcome.status is ProbeStatus.FAILED:
                steps.append(f"{stage.name} / {name}: {outcome.message}")
            elif outcome.status is ProbeStatus.SKIPPED:
                steps.append(f"{stage.name} / {name}: not exercised ({outcome.message})")
    if report.aborted is not None:
        steps.append(f"{report.aborted.stage}: stage aborted ({report.aborted.error})")
    return steps


def render_report(
    report: FinalReport,
    log: logging.Logger,
    *,
    title: str = "Health Report",
    links: Iterable[tuple[str, str]] = (),
) -> None:
    log.info(HEALTHPROBE_HEADER(title).rstrip("\n"))

    for stage in report.stages:
        log.info(f"[bold]{escape(stage.name)}[/bold]:")
        for name, outcome in stage.outcomes.items():
            log.info(f"  {escape(name)}: {_STATUS_LABELS[outcome.status]}")

    if report.aborted is not None:
        log.error(
            f"Run stopped in stage {escape(report.aborted.stage)}: "
            f"{escape(report.aborted.error)}"
        )

    log.info("")
    log.info(
        f"{SYMBOLS.SCORE} OVERALL SCORE: {report.passed}/{report.total} "
        f"probes passed ({report.percent}%)"
    )
    if report.tier is Tier.NEEDS_ATTENTION:
        log.warning(tier_message(report.tier))
    else:
        log.info(tier_message(report.tier))

    resolved = list(links)
    if resolved:
        log.info("")
        log.info(f"{SYMBOLS.LINK} Quick Access URLs:")
        for label, url in resolved:
            log.info(f"  {escape(label)}: {escape(url)}")

    log.info("")
    log.info(f"{SYMBOLS.NEXT} Next Steps:")
    steps = next_steps(report)
    if not steps:
        log.info("  All systems operational.")
    for step in steps:
        log.info(f"  {escape(step)}")


def report_as_dict(report: FinalReport, links: Optional[list[tuple[str, str]]] = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "total": report.total,
        "passed": report.passed,
        "failed": report.failed,
        "skipped": report.skipped,
        "ratio": round(report.ratio, 4),
        "tier": report.tier.value,
        "stages": [
            {
                "name": stage.name,
                "probes": {
                    name: _truncated(outcome.as_dict())
                    for name, outcome in stage.outcomes.items()
                },
            }
            for stage in report.stages
        ],
        "context": {k: v for k, v in report.context.items() if k != "authToken"},
    }
    if report.aborted is not None:
        data["aborted"] = {"stage": report.aborted.stage, "error": report.aborted.error}
    if links:
        data["links"] = dict(links)
    return data


def _truncated(outcome: dict[str, Any]) -> dict[str, Any]:
    raw = outcome.get("raw")
    if isinstance(raw, str) and len(raw) > RAW_PREVIEW:
        outcome["raw"] = raw[:RAW_PREVIEW] + "..."
    return outcome
