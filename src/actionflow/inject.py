from __future__ import annotations

from pathlib import Path
from typing import Any

from .actions import Inject
from .logging import get_logger
from .templating import TemplateEngine
from .terminal import TerminalMessage

logger = get_logger("inject")


def insert_text(content: str, text: str, inject: Inject) -> str | None:
    """Return ``content`` with ``text`` inserted, or ``None`` when the marker is absent."""
    block = text if text.endswith("\n") else text + "\n"
    marker = inject.before or inject.after
    if marker:
        lines = content.splitlines(keepends=True)
        for index, line in enumerate(lines):
            if marker in line:
                if inject.after:
                    if not line.endswith("\n"):
                        lines[index] = line + "\n"
                    lines.insert(index + 1, block)
                else:
                    lines.insert(index, block)
                return "".join(lines)
        return None
    if inject.at == "start":
        return block + content
    if content and not content.endswith("\n"):
        content += "\n"
    return content + block


class InjectActionHandler:
    def __init__(
        self,
        template_engine: TemplateEngine,
        model: dict[str, Any],
        cwd: Path,
        terminal_message: TerminalMessage,
    ) -> None:
        self.template_engine = template_engine
        self.model = model
        self.cwd = cwd
        self.terminal_message = terminal_message

    def execute(self, inject: Inject) -> None:
        to_file_name = self.template_engine.process(inject.to, self.model)
        if not to_file_name:
            self.terminal_message.print("Inject action has no `to:` field; nothing to inject into.")
            return
        text = self.template_engine.process(inject.text, self.model)
        if not text:
            self.terminal_message.print(f"Inject action for {to_file_name} has no text to inject.")
            return
        target = (self.cwd / to_file_name).absolute()
        if not target.exists() and not inject.create:
            self.terminal_message.print(f"Could not inject into {target}. File does not exist.")
            return
        try:
            content = target.read_text(encoding="utf-8") if target.exists() else ""
        except (OSError, UnicodeDecodeError) as exc:
            self.terminal_message.print(f"Could not inject into {target}. {exc}")
            return
        skip = self.template_engine.process(inject.skip, self.model)
        if skip and skip in content:
            self.terminal_message.print(f"Skipping injection into {target}. Found `{skip}`.")
            return
        updated = insert_text(content, text, inject)
        if updated is None:
            marker = inject.before or inject.after
            self.terminal_message.print(f"Could not inject into {target}. Marker `{marker}` not found.")
            return
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(updated, encoding="utf-8")
        except OSError as exc:
            self.terminal_message.print(f"Could not inject into {target}. {exc}")
            return
        logger.debug("Injected %d characters into %s", len(text), target)
        self.terminal_message.print(f"Injected into {target}")
