from __future__ import annotations

import argparse
import json
from typing import Any

from healthprobe.branding import HEALTHPROBE_BANNER, HEALTHPROBE_BOX
from healthprobe.env import get_env
from healthprobe.suites import get_suite, list_suites
from healthprobe.suites.tourist import ISSUED_ID
from healthprobe.cli.render import RENDER


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_check_parser(subparsers: argparse._SubParsersAction) -> None:
    check = subparsers.add_parser("check", help="Run a check suite against the service")

    check.add_argument(
        "suite",
        choices=[s.name for s in list_suites()],
        help="Suite to run",
    )
    check.add_argument(
        "--unique-id",
        help="Identifier of an already registered tourist (required by verify)",
    )
    check.add_argument("--json", action="store_true", help="Print the report as JSON")
    check.add_argument("--verbose", action="store_true")
    check.add_argument("--quiet", action="store_true")


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def _seed_from_args(args: argparse.Namespace) -> dict[str, Any]:
    seed: dict[str, Any] = {}
    unique_id = (getattr(args, "unique_id", None) or "").strip()
    if unique_id:
        seed[ISSUED_ID] = unique_id
    return seed


def handle_check(args: argparse.Namespace) -> int:
    from healthprobe.logger import current_log_file, get_logger, init_logging
    from healthprobe.report import (
        exit_code_for,
        render_report,
        report_as_dict,
        resolve_links,
    )
    from healthprobe.runner import run_all
    from healthprobe.transport import RequestsTransport

    suite = get_suite(args.suite)

    init_logging()
    log = get_logger("healthprobe")

    seed = _seed_from_args(args)
    missing = [k for k in suite.seed_keys if k not in seed]
    if missing:
        log.error(f"Suite {suite.name} needs {', '.join(missing)}; pass --unique-id")
        return 2

    # Force env resolution early so config errors surface before any probe
    env = get_env()

    log.info(HEALTHPROBE_BANNER)
    log.info(
        HEALTHPROBE_BOX(
            [
                ("Suite", suite.name),
                ("API", env.api_url),
                ("Pages", f"{env.secure_page_url} (fallback {env.insecure_page_url})"),
                ("Log", current_log_file()),
            ],
            title=suite.title,
        )
    )

    transport = RequestsTransport.from_env(env)
    try:
        report = run_all(
            suite.stages(env),
            transport,
            seed=seed,
            command_timeout=env.command_timeout,
        )
    finally:
        transport.close()

    links = resolve_links(suite.links, env.secure_page_url, report)

    if args.json:
        RENDER.print_json(json.dumps(report_as_dict(report, links)))
    else:
        render_report(report, log, title=f"{suite.title} Report", links=links)

    log.info(f"RUN_STATUS={report.tier.name.lower()}")
    return exit_code_for(report)
