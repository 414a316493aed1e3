from __future__ import annotations

from pathlib import Path

import yaml

from .actions import ActionsFile, parse_actions_file
from .app_constants import ACTION_FILE_EXTENSIONS
from .errors import ParseError, ReadError


def is_action_file_name(path: Path) -> bool:
    return path.suffix[1:].lower() in ACTION_FILE_EXTENSIONS


def read_action_file(path: Path) -> ActionsFile | None:
    """Parse ``path`` when it has a YAML extension, otherwise return ``None``."""
    if not is_action_file_name(path):
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(f"Could not read resource {path} as a String.") from exc
    return read_action_text(text, str(path))


def read_action_text(text: str, description: str) -> ActionsFile:
    try:
        return parse_actions_file(yaml.safe_load(text))
    except (yaml.YAMLError, ParseError) as exc:
        hint = forgotten_colon_hint(text, description)
        if hint is not None:
            raise hint from exc
        raise ParseError(f"Could not deserialize action file {description}: {exc}") from exc


def forgotten_colon_hint(text: str, description: str) -> ParseError | None:
    for line in text.splitlines():
        stripped = line.strip()
        if "action" in stripped and "actions:" not in stripped:
            return ParseError(
                f"Could not deserialize action file {description}. "
                "You may have forgotten to put a colon after the field 'actions'"
            )
    return None
