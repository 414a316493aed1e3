from __future__ import annotations

import argparse

from ..core import (
    ActionEngine,
    ConsoleTerminalMessage,
    build_initial_model,
    command_path,
    create_template_engine,
    default_model_populators,
    load_config,
    parse_exec_settings,
    resolve_root,
    run_command,
    validate_command_name_input,
)
from ..logging import get_logger

logger = get_logger("cmds.run")


def run_named_command(args: argparse.Namespace, command_name: str, subcommand_name: str) -> int:
    validate_command_name_input(command_name)
    validate_command_name_input(subcommand_name, "Subcommand")
    root = resolve_root(args.root)
    cfg = load_config(root)
    model = build_initial_model(args, getattr(args, "subcommand", None))
    engine = ActionEngine(
        ConsoleTerminalMessage(),
        template_engine_factory=lambda: create_template_engine(cfg["template_engine"]),
        exec_settings=parse_exec_settings(cfg),
    )
    target = command_path(root, command_name, subcommand_name)
    logger.debug("Running %s %s from %s with model keys %s", command_name, subcommand_name, target, sorted(model))
    return run_command(target, root, model, engine, default_model_populators())


def command_dynamic(args: argparse.Namespace) -> int:
    return run_named_command(args, args.subcommand.command, args.subcommand.name)


def command_run(args: argparse.Namespace) -> int:
    return run_named_command(args, args.name, args.subcommand_name)
