"""Typed records for the contents of an action file.

Action files use kebab-case field names. Unknown fields are ignored so
that newer action files still load, but each action entry may carry at
most one of ``generate``, ``inject`` or ``exec``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .errors import ParseError

ACTION_KINDS = ("generate", "inject", "exec")


@dataclass(frozen=True)
class Conditional:
    artifact_id: str | None = None


@dataclass(frozen=True)
class Generate:
    to: str | None = None
    text: str | None = None
    overwrite: bool = False


@dataclass(frozen=True)
class Inject:
    to: str | None = None
    text: str | None = None
    before: str | None = None
    after: str | None = None
    at: str | None = None
    skip: str | None = None
    create: bool = False


@dataclass(frozen=True)
class Define:
    name: str | None = None
    json_path: str | None = None


@dataclass(frozen=True)
class Exec:
    command: str | None = None
    command_file: str | None = None
    dir: str | None = None
    to: str | None = None
    errto: str | None = None
    define: Define | None = None


Action = Union[Generate, Inject, Exec]


@dataclass(frozen=True)
class ActionsFile:
    actions: tuple[Action, ...] = ()
    conditional: Conditional = field(default_factory=Conditional)


def _text(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    return str(value)


def _flag(raw: Mapping[str, Any], key: str, where: str) -> bool:
    value = raw.get(key, False)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ParseError(f"Field `{key}` in {where} must be true or false")


def _section(raw: Any, where: str) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ParseError(f"Field `{where}` must be a mapping")
    return raw


def parse_conditional(raw: Any) -> Conditional:
    data = _section(raw, "conditional")
    artifact_id = _text(data, "artifact-id")
    return Conditional(artifact_id=artifact_id.strip() if artifact_id else None)


def parse_generate(raw: Any) -> Generate:
    data = _section(raw, "generate")
    return Generate(
        to=_text(data, "to"),
        text=_text(data, "text"),
        overwrite=_flag(data, "overwrite", "generate"),
    )


def parse_inject(raw: Any) -> Inject:
    data = _section(raw, "inject")
    at = _text(data, "at")
    if _text(data, "before") is not None and _text(data, "after") is not None:
        raise ParseError("Fields `before` and `after` in inject cannot be used together")
    if at is not None and at.strip().lower() not in {"start", "end"}:
        raise ParseError("Field `at` in inject must be `start` or `end`")
    return Inject(
        to=_text(data, "to"),
        text=_text(data, "text"),
        before=_text(data, "before"),
        after=_text(data, "after"),
        at=at.strip().lower() if at else None,
        skip=_text(data, "skip"),
        create=_flag(data, "create", "inject"),
    )


def parse_exec(raw: Any) -> Exec:
    data = _section(raw, "exec")
    define = None
    if data.get("define") is not None:
        define_data = _section(data["define"], "define")
        define = Define(name=_text(define_data, "name"), json_path=_text(define_data, "json-path"))
    return Exec(
        command=_text(data, "command"),
        command_file=_text(data, "command-file"),
        dir=_text(data, "dir"),
        to=_text(data, "to"),
        errto=_text(data, "errto"),
        define=define,
    )


_PARSERS = {
    "generate": parse_generate,
    "inject": parse_inject,
    "exec": parse_exec,
}


def parse_action(raw: Any) -> Action | None:
    """Build the single action variant in ``raw``; ``None`` when it has none."""
    if not isinstance(raw, Mapping):
        raise ParseError("Each entry under `actions` must be a mapping")
    kinds = [kind for kind in ACTION_KINDS if raw.get(kind) is not None]
    if not kinds:
        return None
    if len(kinds) > 1:
        raise ParseError(
            f"An action may declare only one of {', '.join(ACTION_KINDS)}; found {', '.join(kinds)}"
        )
    kind = kinds[0]
    return _PARSERS[kind](raw[kind])


def parse_actions_file(raw: Any) -> ActionsFile:
    if not isinstance(raw, Mapping):
        raise ParseError("Action file must contain a mapping at the top level")
    if "actions" not in raw:
        raise ParseError("Action file is missing the `actions` field")
    entries = raw["actions"]
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ParseError("Field `actions` must be a list")
    actions = []
    for entry in entries:
        action = parse_action(entry)
        if action is not None:
            actions.append(action)
    return ActionsFile(actions=tuple(actions), conditional=parse_conditional(raw.get("conditional")))
