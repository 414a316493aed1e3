from __future__ import annotations

import argparse
from typing import Any

from .command_files import SubCommand, to_kebab


def parse_vars(items: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise SystemExit(f"Invalid --var `{item}`. Expected KEY=VALUE")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise SystemExit(f"Invalid --var `{item}`. Empty key")
        out[key] = value
    return out


def option_value_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_initial_model(args: argparse.Namespace, subcommand: SubCommand | None) -> dict[str, Any]:
    model: dict[str, Any] = {}
    if subcommand is not None:
        parsed = vars(args)
        for option in subcommand.options:
            value = parsed.get(option_dest(option.name))
            if value is None:
                continue
            model[to_kebab(option.name)] = option_value_text(value)
    model.update(parse_vars(getattr(args, "var", None) or []))
    return model


def option_dest(name: str) -> str:
    return f"option:{name}"
