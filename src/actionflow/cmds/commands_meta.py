from __future__ import annotations

import argparse

from ..core import (
    DEFAULT_CONFIG,
    STARTER_ACTION_FILE,
    STARTER_COMMAND_FILE,
    commands_dir,
    config_dir,
    config_file,
    resolve_root,
    save_config,
    scan_commands,
    validate_command_name_input,
)


def command_init(args: argparse.Namespace) -> int:
    root = resolve_root(args.root)
    cdir = config_dir(root)
    if config_file(root).exists() and not args.force:
        raise SystemExit(f"{config_file(root)} already exists. Use --force to overwrite the config.")
    commands_dir(root).mkdir(parents=True, exist_ok=True)
    save_config(root, DEFAULT_CONFIG)
    print(f"Initialized actionflow in {cdir}")
    return 0


def command_list(args: argparse.Namespace) -> int:
    root = resolve_root(args.root)
    found = scan_commands(root)
    if not found:
        print("No commands found.")
        return 0
    for sub in found:
        label = f"{sub.command} {sub.name}"
        print(f"{label:30} {sub.description}")
    return 0


def command_new(args: argparse.Namespace) -> int:
    validate_command_name_input(args.name)
    validate_command_name_input(args.subcommand_name, "Subcommand")
    root = resolve_root(args.root)
    target = commands_dir(root) / args.name / args.subcommand_name
    if target.exists() and any(target.iterdir()) and not args.force:
        raise SystemExit(f"Command `{args.name} {args.subcommand_name}` already exists at {target}. Use --force to overwrite.")
    target.mkdir(parents=True, exist_ok=True)
    (target / "command.yaml").write_text(STARTER_COMMAND_FILE, encoding="utf-8")
    (target / "hello.yaml").write_text(STARTER_ACTION_FILE, encoding="utf-8")
    print(f"Created command `{args.name} {args.subcommand_name}` in {target}")
    return 0
