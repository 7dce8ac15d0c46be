from __future__ import annotations

import argparse

from healthprobe.env import get_env
from healthprobe.suites import get_suite, list_suites
from healthprobe.cli.render import RENDER
from healthprobe.cli.common import dispatch_subparser_help, print_table


def build_suites_parser(subparsers: argparse._SubParsersAction) -> None:
    suites = subparsers.add_parser("suites", help="Inspect check suites")
    suites.set_defaults(action="list")
    sub = suites.add_subparsers(dest="suites_cmd")

    help_p = sub.add_parser("help", help="Show help for suites")
    help_p.add_argument("path", nargs="*", help="Subcommand path (e.g. list, show)")
    help_p.set_defaults(action="help", _help_parser=suites)

    list_p = sub.add_parser("list", help="List available suites")
    list_p.set_defaults(action="list")

    show_p = sub.add_parser("show", help="Show the stages and probes of a suite")
    show_p.add_argument("name", help="Suite name")
    show_p.set_defaults(action="show")


def handle_suites(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "list":
        env = get_env()
        rows = [
            [
                s.name,
                ", ".join(st.name for st in s.stages(env)),
                ", ".join(s.seed_keys) or "-",
            ]
            for s in list_suites()
        ]
        print_table(["SUITE", "STAGES", "NEEDS"], rows)
        return 0

    if args.action == "show":
        try:
            suite = get_suite(args.name)
        except ValueError as e:
            RENDER.print(f"[red]{e}[/red]")
            return 1

        RENDER.print(f"\n[bold]{suite.title}[/bold] ({suite.name})")
        for i, st in enumerate(suite.stages(get_env()), start=1):
            RENDER.print(f"\n[bold cyan]Stage {i}: {st.name}[/bold cyan]")
            for probe in st.probes:
                needs = ", ".join(sorted(probe.requires))
                suffix = f"  (needs {needs})" if needs else ""
                RENDER.print(
                    f"  {probe.name:<28} {probe.target.method:<5} {probe.target.path}{suffix}",
                    markup=False,
                    highlight=False,
                )
        RENDER.print()
        return 0

    raise RuntimeError(f"Unknown suites action: {args.action}")
