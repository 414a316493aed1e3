from __future__ import annotations

import argparse
from typing import Iterable

from .core import SubCommand
from .parser_parts.commands import register_builtin_commands
from .parser_parts.dynamic import register_dynamic_commands


def add_global_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        help="Project root where .actionflow lives (defaults to current directory).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug diagnostics to stderr.")


def build_preparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    add_global_arguments(parser)
    return parser


def build_parser(found: Iterable[SubCommand] = ()) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="actionflow",
        description="Run user-defined commands described by declarative action files.",
    )
    add_global_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", required=True)
    register_builtin_commands(subparsers)
    register_dynamic_commands(subparsers, found)
    return parser
