"""Template engines used to render action fields against the model.

Both engines render missing keys as the empty string.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from jinja2 import TemplateError as JinjaTemplateError
from jinja2.sandbox import SandboxedEnvironment

from .app_constants import DEFAULT_TEMPLATE_ENGINE, VAR_PATTERN
from .errors import ConfigError, TemplateError

_MISSING = object()


class TemplateEngine(Protocol):
    def process(self, text: str | None, model: Mapping[str, Any]) -> str: ...


def lookup_value(model: Mapping[str, Any], key: str) -> Any:
    if key in model:
        return model[key]
    current: Any = model
    for part in key.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(current, (list, tuple)) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return _MISSING
    return current


def stringify(value: Any) -> str:
    if value is None or value is _MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_text_with_vars(text: str, model: Mapping[str, Any]) -> tuple[str, set[str]]:
    missing: set[str] = set()

    def repl(match: Any) -> str:
        key = match.group(1)
        value = lookup_value(model, key)
        if value is _MISSING:
            missing.add(key)
        return stringify(value)

    return VAR_PATTERN.sub(repl, text), missing


class SimpleTemplateEngine:
    """Mustache-style ``{{ key }}`` substitution, with dotted keys for nested values."""

    def process(self, text: str | None, model: Mapping[str, Any]) -> str:
        if not text:
            return ""
        rendered, _ = render_text_with_vars(text, model)
        return rendered


class Jinja2TemplateEngine:
    def __init__(self) -> None:
        self._env = SandboxedEnvironment(keep_trailing_newline=True)
        self._env.globals = {}

    def process(self, text: str | None, model: Mapping[str, Any]) -> str:
        if not text:
            return ""
        context = {**model, "model": dict(model)}
        try:
            return self._env.from_string(text).render(context)
        except JinjaTemplateError as exc:
            raise TemplateError(f"Could not render template `{text}`: {exc}") from exc


def create_template_engine(name: str = DEFAULT_TEMPLATE_ENGINE) -> TemplateEngine:
    if name == "simple":
        return SimpleTemplateEngine()
    if name == "jinja2":
        return Jinja2TemplateEngine()
    raise ConfigError(f"Unknown template engine `{name}`")
