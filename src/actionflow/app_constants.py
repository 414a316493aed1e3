from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

CONFIG_DIR_NAME = ".actionflow"
COMMANDS_DIR_NAME = "commands"
CONFIG_FILE_NAME = "config.json"

ACTION_FILE_EXTENSIONS = ("yaml", "yml")
COMMAND_FILE_NAMES = ("command.yaml", "command.yml")

DEFAULT_SHELL = "bash"
DEFAULT_EXEC_TIMEOUT_SECONDS = 300
DEFAULT_TEMPLATE_ENGINE = "simple"
TEMPLATE_ENGINES = ("simple", "jinja2")
DEFAULT_SUBCOMMAND_NAME = "new"

MAVEN_MODEL = "maven-model"

VAR_PATTERN = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_.-]*)\s*\}\}")

# argparse type for each `data-type` accepted in command.yaml
OPTION_DATA_TYPES: dict[str, Any] = {
    "string": str,
    "str": str,
    "int": int,
    "integer": int,
    "float": float,
    "double": float,
    "number": float,
    "bool": bool,
    "boolean": bool,
}


@dataclass
class ExecSettings:
    shell: str
    timeout_seconds: float


DEFAULT_CONFIG: dict[str, Any] = {
    "shell": DEFAULT_SHELL,
    "exec_timeout_seconds": DEFAULT_EXEC_TIMEOUT_SECONDS,
    "template_engine": DEFAULT_TEMPLATE_ENGINE,
}

STARTER_COMMAND_FILE = """\
command:
  description: Generate a hello world file
  options:
    - name: greeting
      description: Who to greet
      data-type: string
      default-value: World
"""

STARTER_ACTION_FILE = """\
actions:
  - generate:
      to: hello.txt
      text: |
        Hello {{greeting}} on {{os-name}}.
"""
