from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


def load_json(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc


def save_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def parse_lenient_json(text: str) -> Any:
    """Parse process output as JSON, tolerating unquoted field names."""
    payload = text.strip()
    if not payload:
        raise ValueError("empty output")
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        json_error = exc
    # YAML flow mappings accept `{name: "x"}`, which strict JSON rejects.
    try:
        parsed = yaml.safe_load(payload)
    except yaml.YAMLError:
        raise ValueError(str(json_error)) from json_error
    if not isinstance(parsed, (dict, list)):
        raise ValueError(str(json_error))
    return parsed
