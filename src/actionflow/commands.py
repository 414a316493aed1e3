from __future__ import annotations

from .cmds.commands_meta import command_init, command_list, command_new
from .cmds.run import command_dynamic, command_run

__all__ = [
    "command_dynamic",
    "command_init",
    "command_list",
    "command_new",
    "command_run",
]
