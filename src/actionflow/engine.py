"""Runs the action files of one command invocation against a shared model.

Files run in path order and actions in declared order. Every action sees
the writes made to ``model`` by the actions before it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from .actions import ActionsFile, Conditional, Define, Exec, Generate, Inject
from .app_constants import DEFAULT_EXEC_TIMEOUT_SECONDS, DEFAULT_SHELL, ExecSettings
from .discovery import find_command_action_files
from .errors import (
    ActionflowError,
    ConditionalNotSatisfiedError,
    ExecSetupError,
    MissingCommandError,
    NoActionsFoundError,
    ReadError,
    TemplateError,
)
from .inject import InjectActionHandler
from .logging import get_logger
from .populators import ModelPopulator, dependency_artifact_ids, populate_model
from .runner_utils import build_shell_command, describe_command, extract_json_path_value, run_shell_process
from .templating import SimpleTemplateEngine, TemplateEngine
from .terminal import TerminalMessage

logger = get_logger("engine")


class ActionEngine:
    def __init__(
        self,
        terminal_message: TerminalMessage,
        template_engine_factory: Callable[[], TemplateEngine] = SimpleTemplateEngine,
        exec_settings: ExecSettings | None = None,
    ) -> None:
        self.terminal_message = terminal_message
        self.template_engine_factory = template_engine_factory
        self.exec_settings = exec_settings or ExecSettings(
            shell=DEFAULT_SHELL, timeout_seconds=DEFAULT_EXEC_TIMEOUT_SECONDS
        )

    def run(
        self,
        action_files: Mapping[Path, ActionsFile],
        cwd: Path,
        command_dir: Path,
        model: dict[str, Any],
    ) -> None:
        if not action_files:
            raise NoActionsFoundError(
                f"No command action files found to process in directory {command_dir.absolute()}"
            )
        for path, actions_file in sorted(action_files.items(), key=lambda item: str(item[0])):
            check_conditional(actions_file.conditional, model)
            if not actions_file.actions:
                self.terminal_message.print(f"No actions to execute in {path.absolute()}")
                continue
            template_engine = self.template_engine_factory()
            for action in actions_file.actions:
                if isinstance(action, Generate):
                    self.generate(action, template_engine, model, cwd)
                elif isinstance(action, Inject):
                    InjectActionHandler(template_engine, model, cwd, self.terminal_message).execute(action)
                elif isinstance(action, Exec):
                    self.execute_shell_command(action, template_engine, model, cwd, command_dir)
                else:
                    raise TypeError(f"Unknown action type {type(action).__name__}")

    def generate(
        self, generate: Generate, template_engine: TemplateEngine, model: dict[str, Any], cwd: Path
    ) -> None:
        if not generate.text:
            return
        try:
            to_file_name = template_engine.process(generate.to, model)
        except TemplateError as exc:
            self.terminal_message.print(f"Could not generate file {generate.to}")
            self.terminal_message.print(str(exc))
            return
        if not to_file_name.strip():
            return
        path = (cwd / to_file_name.strip()).absolute()
        if path.exists() and not generate.overwrite:
            self.terminal_message.print(
                f"Skipping generation of {path}. File exists and overwrite option not specified."
            )
            return
        try:
            result = template_engine.process(generate.text, model)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(result, encoding="utf-8")
        except (TemplateError, OSError) as exc:
            logger.debug("Generation of %s failed", path, exc_info=True)
            self.terminal_message.print(f"Could not generate file {path}")
            self.terminal_message.print(str(exc))
            return
        self.terminal_message.print(f"Generated {path}")

    def resolve_command(
        self, exec_action: Exec, template_engine: TemplateEngine, model: dict[str, Any], command_dir: Path
    ) -> str:
        if exec_action.command and exec_action.command.strip():
            return template_engine.process(exec_action.command, model)
        if exec_action.command_file and exec_action.command_file.strip():
            command_file = command_dir / exec_action.command_file
            if not command_file.is_file():
                raise ReadError(f"Can not read file: {command_file.absolute()}")
            try:
                with command_file.open(encoding="utf-8") as handle:
                    first_line = handle.readline().rstrip("\r\n")
            except (OSError, UnicodeDecodeError) as exc:
                raise ReadError(f"Can not read file: {command_file.absolute()}") from exc
            return template_engine.process(first_line, model)
        raise MissingCommandError("No text found for command: or command-file: field in exec action.")

    def resolve_path_field(
        self, expression: str, template_engine: TemplateEngine, model: dict[str, Any], cwd: Path, what: str
    ) -> Path:
        try:
            rendered = template_engine.process(expression, model).strip()
        except TemplateError as exc:
            raise ExecSetupError(f"Error evaluating exec {what}. Expression: {expression}") from exc
        if not rendered:
            raise ExecSetupError(f"Error evaluating exec {what}. Expression: {expression}")
        return (cwd / rendered).absolute()

    def resolve_working_directory(
        self, exec_action: Exec, template_engine: TemplateEngine, model: dict[str, Any], cwd: Path
    ) -> Path:
        if exec_action.dir is None:
            return cwd.resolve()
        directory = self.resolve_path_field(exec_action.dir, template_engine, model, cwd, "working directory")
        try:
            directory = directory.resolve(strict=True)
        except OSError as exc:
            raise ExecSetupError(
                f"Error evaluating exec working directory. Expression: {exec_action.dir}"
            ) from exc
        if not directory.is_dir():
            raise ExecSetupError(f"Error evaluating exec working directory. Expression: {exec_action.dir}")
        return directory

    def execute_shell_command(
        self,
        exec_action: Exec,
        template_engine: TemplateEngine,
        model: dict[str, Any],
        cwd: Path,
        command_dir: Path,
    ) -> None:
        command = self.resolve_command(exec_action, template_engine, model, command_dir)
        cmd = build_shell_command(self.exec_settings.shell, command)
        working_dir = self.resolve_working_directory(exec_action, template_engine, model, cwd)
        stdout_path = None
        if exec_action.to is not None:
            stdout_path = self.resolve_path_field(exec_action.to, template_engine, model, cwd, "destination file")
        stderr_path = None
        if exec_action.errto is not None:
            stderr_path = self.resolve_path_field(exec_action.errto, template_engine, model, cwd, "error file")

        self.terminal_message.print(f"Executing: {describe_command(cmd)}")
        logger.debug("Working directory %s, stdout %s, stderr %s", working_dir, stdout_path, stderr_path)
        result = run_shell_process(
            cmd,
            working_dir,
            self.exec_settings.timeout_seconds,
            stdout_path=stdout_path,
            stderr_path=stderr_path,
        )
        if result.timed_out:
            self.terminal_message.print(
                f"Command '{describe_command(cmd)}' timed out after "
                f"{self.exec_settings.timeout_seconds:g} seconds"
            )
            return
        if result.returncode != 0:
            self.terminal_message.print(
                f"Command '{describe_command(cmd)}' exited with value {result.returncode}"
            )
            self.terminal_message.print(f"stderr = {result.stderr}")
            return
        self.terminal_message.print(f"Command '{describe_command(cmd)}' executed successfully")
        if exec_action.define is not None:
            self.define_variable(exec_action.define, result.stdout, model, stdout_captured=stdout_path is None)

    def define_variable(
        self, define: Define, stdout: str, model: dict[str, Any], stdout_captured: bool
    ) -> None:
        if not define.name or not define.json_path:
            self.terminal_message.print(f"exec: define: has a null value. Define = {define}")
            return
        if not stdout_captured:
            self.terminal_message.print(
                f"exec: define: {define.name} ignored because stdout was redirected to a file."
            )
            return
        try:
            value = extract_json_path_value(stdout, define.json_path)
        except ValueError as exc:
            self.terminal_message.print(
                f"exec: define: could not read {define.json_path} from command output: {exc}"
            )
            return
        if value is not None:
            model.setdefault(define.name, value)


def check_conditional(conditional: Conditional, model: dict[str, Any]) -> None:
    artifact_id = (conditional.artifact_id or "").strip()
    if not artifact_id:
        return
    artifact_ids = dependency_artifact_ids(model) or set()
    if artifact_id.lower() not in artifact_ids:
        raise ConditionalNotSatisfiedError(artifact_id)


def run_command(
    command_dir: Path,
    cwd: Path,
    model: dict[str, Any],
    engine: ActionEngine,
    populators: Iterable[ModelPopulator] = (),
) -> int:
    """Run every action file of one command; domain errors become one error notice."""
    populate_model(model, cwd, populators)
    action_files = find_command_action_files(command_dir)
    if not action_files:
        raise NoActionsFoundError(
            f"No command action files found to process in directory {command_dir.absolute()}"
        )
    try:
        engine.run(action_files, cwd, command_dir, model)
    except ActionflowError as exc:
        logger.debug("Command in %s failed", command_dir, exc_info=True)
        engine.terminal_message.print(str(exc), style="error")
        if getattr(exc, "interrupted", False):
            return 130
        return 1
    return 0
