from __future__ import annotations

from argparse import _SubParsersAction
from typing import Any, Iterable

from ..commands import command_dynamic
from ..core import OPTION_DATA_TYPES, CommandOption, SubCommand, option_dest
from ..logging import get_logger

logger = get_logger("parser")

RESERVED_COMMANDS = {"init", "command"}


def option_kwargs(option: CommandOption) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"dest": option_dest(option.name), "help": option.description or None}
    value_type = OPTION_DATA_TYPES[option.data_type]
    if value_type is bool:
        kwargs["action"] = "store_true"
        kwargs["default"] = (option.default_value or "").strip().lower() == "true"
        return kwargs
    kwargs["type"] = value_type
    if option.param_label:
        kwargs["metavar"] = option.param_label
    if option.default_value is not None:
        kwargs["default"] = value_type(option.default_value)
    elif option.required:
        kwargs["required"] = True
    return kwargs


def register_dynamic_commands(subparsers: _SubParsersAction, found: Iterable[SubCommand]) -> None:
    grouped: dict[str, _SubParsersAction] = {}
    for sub in found:
        if sub.command in RESERVED_COMMANDS:
            logger.warning("Skipping command `%s`; the name is reserved", sub.command)
            continue
        if sub.command not in grouped:
            p_command = subparsers.add_parser(sub.command, help=f"User-defined command `{sub.command}`.")
            grouped[sub.command] = p_command.add_subparsers(dest="dynamic_subcommand", required=True)
        p_sub = grouped[sub.command].add_parser(sub.name, help=sub.description)
        for option in sub.options:
            p_sub.add_argument(f"--{option.name}", **option_kwargs(option))
        p_sub.add_argument("--var", action="append", default=[], metavar="KEY=VALUE", help="Extra model variable. Can be repeated.")
        p_sub.set_defaults(func=command_dynamic, subcommand=sub)
        logger.debug("Adding command/subcommand %s/%s", sub.command, sub.name)
