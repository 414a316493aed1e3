from __future__ import annotations

from argparse import _SubParsersAction

from ..commands import command_init, command_list, command_new, command_run
from ..core import DEFAULT_SUBCOMMAND_NAME


def register_builtin_commands(subparsers: _SubParsersAction) -> None:
    p_init = subparsers.add_parser("init", help="Create the .actionflow config and commands directory.")
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing config.")
    p_init.set_defaults(func=command_init)

    p_command = subparsers.add_parser("command", help="Manage and run user-defined commands.")
    command_sub = p_command.add_subparsers(dest="command_action", required=True)

    p_list = command_sub.add_parser("list", help="List commands found under .actionflow/commands.")
    p_list.set_defaults(func=command_list)

    p_new = command_sub.add_parser("new", help="Create a starter command with a sample action file.")
    p_new.add_argument("name", help="Command name.")
    p_new.add_argument("subcommand_name", nargs="?", default=DEFAULT_SUBCOMMAND_NAME, help="Subcommand name (default: new).")
    p_new.add_argument("--force", action="store_true", help="Overwrite the starter files if the command exists.")
    p_new.set_defaults(func=command_new)

    p_run = command_sub.add_parser("run", help="Run a command's action files without option parsing.")
    p_run.add_argument("name", help="Command name.")
    p_run.add_argument("subcommand_name", help="Subcommand name.")
    p_run.add_argument("--var", action="append", default=[], metavar="KEY=VALUE", help="Model variable. Can be repeated. Example: --var name=World")
    p_run.set_defaults(func=command_run)
