from __future__ import annotations

import argparse
import sys

from healthprobe.bootstrap import bootstrap_base_env, bootstrap_run_context
from healthprobe.env import ConfigError


def _dispatch_help(parser: argparse.ArgumentParser, argv: list[str]) -> int:
    # Support:
    #   healthprobe help
    #   healthprobe help check
    #   healthprobe logs help
    if not argv:
        parser.print_help()
        return 0

    if argv and argv[0] == "help":
        argv = argv[1:]

    if not argv:
        parser.print_help()
        return 0

    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="healthprobe",
        description="Health and feature checks for the tourist registry service",
    )

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from healthprobe.cli.cli_check import build_check_parser
    from healthprobe.cli.cli_env import build_env_parser
    from healthprobe.cli.cli_logs import build_logs_parser
    from healthprobe.cli.cli_suites import build_suites_parser

    build_check_parser(sub)
    build_suites_parser(sub)
    build_env_parser(sub)
    build_logs_parser(sub)

    return p


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "check":
        from healthprobe.cli.cli_check import handle_check

        return handle_check(args)

    if args.command == "suites":
        from healthprobe.cli.cli_suites import handle_suites

        return handle_suites(args)

    if args.command == "env":
        from healthprobe.cli.cli_env import handle_env

        return handle_env(args)

    if args.command == "logs":
        from healthprobe.cli.cli_logs import handle_logs

        return handle_logs(args)

    raise RuntimeError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    # Load .env and base environment early
    bootstrap_base_env()

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0

    args, unknown = parser.parse_known_args(argv)

    # Unified help routing
    if getattr(args, "_help", False) or (unknown and unknown[-1] == "help"):
        return _dispatch_help(parser, argv)
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")

    # JSON output owns stdout, so console logging is silenced with it.
    quiet = bool(getattr(args, "quiet", False) or getattr(args, "json", False))

    # Stamp run context early (so subprocesses inherit it)
    bootstrap_run_context(
        command=args.command,
        suite=getattr(args, "suite", None) if args.command == "check" else None,
        verbose=bool(getattr(args, "verbose", False)),
        quiet=quiet,
    )

    try:
        return _dispatch(args)
    except ConfigError as e:
        from healthprobe.cli.render import RENDER

        RENDER.print(f"[red]Configuration error:[/red] {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
