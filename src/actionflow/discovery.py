from __future__ import annotations

import os
from pathlib import Path

from .action_reader import read_action_file
from .actions import ActionsFile
from .app_constants import COMMAND_FILE_NAMES
from .errors import ActionIOError
from .logging import get_logger

logger = get_logger("discovery")

_TEXT_CHARS = bytearray({7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x100)) - {0x7F})


def is_text_file(path: Path, sample_size: int = 8192) -> bool:
    with path.open("rb") as handle:
        sample = handle.read(sample_size)
    if b"\x00" in sample:
        return False
    if not sample:
        return True
    non_text = len(sample.translate(None, _TEXT_CHARS))
    return non_text / len(sample) <= 0.30


def find_text_files(root: Path) -> list[Path]:
    def on_error(exc: OSError) -> None:
        raise exc

    matches: list[Path] = []
    try:
        if not root.is_dir():
            raise FileNotFoundError(f"No such directory: {root}")
        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            for filename in filenames:
                path = Path(dirpath) / filename
                if not path.is_file():
                    continue
                if Path(dirpath) == root and filename in COMMAND_FILE_NAMES:
                    continue
                if is_text_file(path):
                    matches.append(path)
                else:
                    logger.debug("Skipping binary file %s", path)
    except OSError as exc:
        raise ActionIOError(f"Error trying to detect action files in {root}: {exc}") from exc
    return matches


def find_command_action_files(root: Path) -> dict[Path, ActionsFile]:
    """Map every action file below ``root`` to its parsed contents, sorted by path."""
    found: dict[Path, ActionsFile] = {}
    for path in find_text_files(root):
        actions_file = read_action_file(path)
        if actions_file is not None:
            found[path] = actions_file
        else:
            logger.debug("Ignoring non action file %s", path)
    return dict(sorted(found.items(), key=lambda item: str(item[0])))
