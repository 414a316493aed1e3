from __future__ import annotations

from pathlib import Path
from typing import Any

from .app_constants import (
    DEFAULT_CONFIG,
    DEFAULT_EXEC_TIMEOUT_SECONDS,
    DEFAULT_SHELL,
    DEFAULT_TEMPLATE_ENGINE,
    TEMPLATE_ENGINES,
    ExecSettings,
)
from .app_paths import config_file
from .errors import ConfigError
from .mapping_io import load_json, save_json


def parse_exec_settings(cfg: dict[str, Any]) -> ExecSettings:
    return ExecSettings(shell=cfg["shell"], timeout_seconds=float(cfg["exec_timeout_seconds"]))


def normalized_config(raw: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")
    shell = str(raw.get("shell", DEFAULT_SHELL)).strip()
    if not shell:
        raise ConfigError("Config shell cannot be empty")
    timeout = raw.get("exec_timeout_seconds", DEFAULT_EXEC_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("Config exec_timeout_seconds must be a number greater than zero")
    engine = str(raw.get("template_engine", DEFAULT_TEMPLATE_ENGINE)).strip().lower()
    if engine not in TEMPLATE_ENGINES:
        choices = ", ".join(f"`{name}`" for name in TEMPLATE_ENGINES)
        raise ConfigError(f"Config template_engine must be one of {choices}")
    return {
        "shell": shell,
        "exec_timeout_seconds": timeout,
        "template_engine": engine,
    }


def load_config(root: Path) -> dict[str, Any]:
    path = config_file(root)
    if not path.exists():
        return dict(DEFAULT_CONFIG)
    return normalized_config(load_json(path))


def save_config(root: Path, cfg: dict[str, Any]) -> None:
    path = config_file(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    save_json(path, normalized_config(cfg))
