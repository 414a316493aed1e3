from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .app_constants import COMMAND_FILE_NAMES, OPTION_DATA_TYPES
from .app_paths import commands_dir
from .errors import CommandDefinitionError
from .logging import get_logger

logger = get_logger("commands")

DEFAULT_DESCRIPTION = "Dynamic command"


@dataclass(frozen=True)
class CommandOption:
    name: str
    description: str = ""
    data_type: str = "string"
    default_value: str | None = None
    required: bool = False
    param_label: str | None = None


@dataclass(frozen=True)
class SubCommand:
    command: str
    name: str
    path: Path
    description: str = DEFAULT_DESCRIPTION
    options: tuple[CommandOption, ...] = field(default_factory=tuple)


def parse_option(raw: Any, where: Path) -> CommandOption | None:
    if not isinstance(raw, dict):
        raise CommandDefinitionError(f"Each option in {where} must be a mapping")
    name = str(raw.get("name") or "").strip()
    if not name:
        logger.warning("Option name not provided in %s", where)
        return None
    data_type = str(raw.get("data-type") or "string").strip().lower()
    if data_type not in OPTION_DATA_TYPES:
        raise CommandDefinitionError(f"Option `{name}` in {where} has unsupported data-type `{data_type}`")
    default_value = raw.get("default-value")
    value_type = OPTION_DATA_TYPES[data_type]
    if default_value is not None and value_type is not bool:
        try:
            value_type(str(default_value))
        except ValueError as exc:
            raise CommandDefinitionError(
                f"Option `{name}` in {where} has default-value `{default_value}` that is not a valid {data_type}"
            ) from exc
    return CommandOption(
        name=name,
        description=str(raw.get("description") or "").strip(),
        data_type=data_type,
        default_value=None if default_value is None else str(default_value),
        required=bool(raw.get("required", False)),
        param_label=raw.get("param-label"),
    )


def read_command_file(path: Path) -> tuple[str, tuple[CommandOption, ...]]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise CommandDefinitionError(f"Could not read command file {path}: {exc}") from exc
    command = data.get("command") if isinstance(data, dict) else None
    if not isinstance(command, dict):
        raise CommandDefinitionError(f"Command file {path} must contain a `command:` mapping")
    description = str(command.get("description") or "").strip() or DEFAULT_DESCRIPTION
    raw_options = command.get("options") or []
    if not isinstance(raw_options, list):
        raise CommandDefinitionError(f"Field `options` in {path} must be a list")
    options = tuple(
        option for option in (parse_option(raw, path) for raw in raw_options) if option is not None
    )
    return description, options


def load_subcommand(command: str, path: Path) -> SubCommand:
    for file_name in COMMAND_FILE_NAMES:
        command_file = path / file_name
        if command_file.is_file():
            description, options = read_command_file(command_file)
            return SubCommand(command, path.name, path, description, options)
    return SubCommand(command, path.name, path)


def scan_commands(root: Path) -> list[SubCommand]:
    base = commands_dir(root)
    if not base.is_dir():
        return []
    found: list[SubCommand] = []
    for command_path in sorted(p for p in base.iterdir() if p.is_dir()):
        for sub_path in sorted(p for p in command_path.iterdir() if p.is_dir()):
            try:
                found.append(load_subcommand(command_path.name, sub_path))
            except CommandDefinitionError as exc:
                logger.warning("Skipping command `%s %s`: %s", command_path.name, sub_path.name, exc)
    return found


def to_kebab(original: str) -> str:
    result: list[str] = []
    was_lowercase = False
    for ch in original:
        if ch.isupper() and was_lowercase:
            result.append("-")
        was_lowercase = ch.islower()
        result.append(ch.lower())
    return "".join(result)
