"""Error types raised while reading and running action files."""

from __future__ import annotations


class ActionflowError(Exception):
    """Base class for every user-facing actionflow failure."""


class ParseError(ActionflowError):
    pass


class NoActionsFoundError(ActionflowError):
    pass


class ConditionalNotSatisfiedError(ActionflowError):
    def __init__(self, artifact_id: str) -> None:
        super().__init__(
            f"Conditional on artifact-id not satisfied. Expected artifact-id {artifact_id} "
            "but was not found."
        )
        self.artifact_id = artifact_id


class MissingCommandError(ActionflowError):
    pass


class ExecSetupError(ActionflowError):
    pass


class ReadError(ActionflowError):
    pass


class ExecutionFailedError(ActionflowError):
    def __init__(self, message: str, interrupted: bool = False) -> None:
        super().__init__(message)
        self.interrupted = interrupted


class ActionIOError(ActionflowError):
    pass


class TemplateError(ActionflowError):
    pass


class ConfigError(ActionflowError):
    pass


class CommandDefinitionError(ActionflowError):
    pass


__all__ = [
    "ActionIOError",
    "ActionflowError",
    "CommandDefinitionError",
    "ConditionalNotSatisfiedError",
    "ConfigError",
    "ExecSetupError",
    "ExecutionFailedError",
    "MissingCommandError",
    "NoActionsFoundError",
    "ParseError",
    "ReadError",
    "TemplateError",
]
