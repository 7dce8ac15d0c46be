from __future__ import annotations

import argparse
from datetime import datetime

from healthprobe.cli.common import (
    dispatch_subparser_help,
    find_log_file,
    infer_run_status,
    iter_log_files,
    print_table,
    print_tail,
    resolve_log_dir,
)
from healthprobe.cli.render import RENDER


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--suite", help="Only logs of this suite (logs/check/<suite>/)")
    p.add_argument(
        "--command",
        dest="log_command",
        default="check",
        help="Command whose logs to use (default: check)",
    )
    p.add_argument("--dir", help="Explicit log directory")


def build_logs_parser(subparsers: argparse._SubParsersAction) -> None:
    logs = subparsers.add_parser("logs", help="Inspect log files of earlier runs")
    lsub = logs.add_subparsers(dest="logs_cmd", required=True)

    help_p = lsub.add_parser("help", help="Show help for logs")
    help_p.add_argument("path", nargs="*", help="Subcommand path (e.g. list, show)")
    help_p.set_defaults(action="help", _help_parser=logs)

    list_p = lsub.add_parser("list", help="List runs, newest first, with their status")
    _add_location_args(list_p)
    list_p.set_defaults(action="list")

    show_p = lsub.add_parser("show", help="Print the end of one log file")
    show_p.add_argument("name", help="Log filename or stem")
    _add_location_args(show_p)
    show_p.add_argument("--tail", type=int, default=120, help="Lines from end (0 = all)")
    show_p.set_defaults(action="show")


def _modified(path) -> str:
    return datetime.fromtimestamp(path.stat().st_mtime).strftime("%Y-%m-%d %H:%M:%S")


def handle_logs(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    log_dir = resolve_log_dir(
        command=args.log_command, suite=args.suite, explicit=args.dir
    )

    if args.action == "list":
        rows = [
            [p.name, infer_run_status(p), _modified(p)] for p in iter_log_files(log_dir)
        ]
        print_table(["LOG", "STATUS", "MODIFIED"], rows)
        return 0

    if args.action == "show":
        path = find_log_file(log_dir, args.name)
        if path is None:
            RENDER.print(f"Log not found in {log_dir}: {args.name}", markup=False)
            return 1
        print_tail(path, args.tail)
        return 0

    raise RuntimeError(f"Unknown logs action: {args.action}")
