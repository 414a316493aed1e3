from __future__ import annotations

from pathlib import Path

from .app_constants import COMMANDS_DIR_NAME, CONFIG_DIR_NAME, CONFIG_FILE_NAME


def resolve_root(path: str | None) -> Path:
    return Path(path).expanduser().resolve() if path else Path.cwd().resolve()


def config_dir(root: Path) -> Path:
    return root / CONFIG_DIR_NAME


def commands_dir(root: Path) -> Path:
    return config_dir(root) / COMMANDS_DIR_NAME


def config_file(root: Path) -> Path:
    return config_dir(root) / CONFIG_FILE_NAME


def command_path(root: Path, command_name: str, subcommand_name: str) -> Path:
    return (commands_dir(root) / command_name / subcommand_name).absolute()


def validate_command_name_input(name: str, kind: str = "Command") -> None:
    if not name.strip():
        raise SystemExit(f"{kind} name cannot be empty")
    if Path(name).name != name or name.startswith("."):
        raise SystemExit(f"{kind} name `{name}` cannot contain path separators")
