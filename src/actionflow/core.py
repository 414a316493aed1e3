from __future__ import annotations

from .app_constants import (
    DEFAULT_CONFIG,
    DEFAULT_SUBCOMMAND_NAME,
    OPTION_DATA_TYPES,
    STARTER_ACTION_FILE,
    STARTER_COMMAND_FILE,
)
from .app_paths import command_path, commands_dir, config_dir, config_file, resolve_root, validate_command_name_input
from .command_files import CommandOption, SubCommand, scan_commands
from .config_ops import load_config, parse_exec_settings, save_config
from .engine import ActionEngine, run_command
from .errors import ActionflowError
from .model_vars import build_initial_model, option_dest
from .populators import default_model_populators
from .templating import create_template_engine
from .terminal import ConsoleTerminalMessage
