from __future__ import annotations

import argparse

from rich import box
from rich.markup import escape
from rich.table import Table

from healthprobe.env import get_env
from healthprobe.cli.render import RENDER
from healthprobe.cli.common import dispatch_subparser_help


def build_env_parser(subparsers: argparse._SubParsersAction) -> None:
    env = subparsers.add_parser("env", help="Inspect the resolved configuration")
    sub = env.add_subparsers(dest="env_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for env")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=env)

    dump_p = sub.add_parser(
        "dump", help="Show target URLs, timeouts and credentials (masked)"
    )
    dump_p.set_defaults(action="dump")


def handle_env(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "dump":
        return handle_env_dump()

    raise RuntimeError(f"Unknown env action: {args.action}")


def handle_env_dump() -> int:
    table = Table(
        title="Runtime Environment",
        box=box.SIMPLE,
        show_header=False,
        title_justify="left",
    )
    table.add_column("key", style="bold")
    table.add_column("value", overflow="fold")

    for section, values in get_env().as_dict().items():
        table.add_section()
        table.add_row(f"[cyan]{section}[/cyan]", "")
        for key, value in values.items():
            table.add_row(f"  {key}", escape(str(value)))

    RENDER.print(table)
    return 0
