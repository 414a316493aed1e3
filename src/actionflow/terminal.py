from __future__ import annotations

import sys
from typing import Protocol


class TerminalMessage(Protocol):
    def print(self, message: str, style: str | None = None) -> None: ...


class ConsoleTerminalMessage:
    """Notices go to stdout, error-styled messages to stderr."""

    def print(self, message: str, style: str | None = None) -> None:
        stream = sys.stderr if style == "error" else sys.stdout
        print(message, file=stream, flush=True)
