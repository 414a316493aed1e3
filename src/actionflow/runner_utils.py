from __future__ import annotations

import os
import shlex
import signal
import subprocess
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonpath_ng.ext import parse as parse_json_path
from jsonpath_ng.exceptions import JSONPathError

from .errors import ExecSetupError, ExecutionFailedError
from .logging import get_logger
from .mapping_io import parse_lenient_json

logger = get_logger("exec")


@dataclass
class ExecResult:
    returncode: int | None
    stdout: str
    stderr: str
    timed_out: bool = False


def kill_process_tree(process: subprocess.Popen) -> None:
    if os.name == "posix":
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        process.kill()


def build_shell_command(shell: str, command: str) -> list[str]:
    return [shell, "-c", command]


def describe_command(cmd: list[str]) -> str:
    return " ".join(cmd)


def _open_redirect(stack: ExitStack, path: Path | None, stream: str) -> Any:
    if path is None:
        return subprocess.PIPE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return stack.enter_context(path.open("w", encoding="utf-8"))
    except OSError as exc:
        raise ExecSetupError(f"Could not open {stream} redirect file {path}: {exc}") from exc


def run_shell_process(
    cmd: list[str],
    cwd: Path,
    timeout: float,
    stdout_path: Path | None = None,
    stderr_path: Path | None = None,
) -> ExecResult:
    """Run ``cmd`` in ``cwd``; streams not redirected to a file are captured in memory.

    ``communicate`` drains both pipes while the child runs, so a chatty
    process cannot block on a full pipe buffer.
    """
    with ExitStack() as stack:
        stdout_target = _open_redirect(stack, stdout_path, "stdout")
        stderr_target = _open_redirect(stack, stderr_path, "stderr")
        try:
            process = subprocess.Popen(
                cmd,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=stdout_target,
                stderr=stderr_target,
                encoding="utf-8",
                errors="replace",
                start_new_session=os.name == "posix",
            )
        except OSError as exc:
            raise ExecutionFailedError(
                f"Execution of command '{describe_command(cmd)}' failed: {exc}"
            ) from exc
        with process:
            try:
                stdout, stderr = process.communicate(timeout=timeout)
            except subprocess.TimeoutExpired:
                kill_process_tree(process)
                stdout, stderr = process.communicate()
                logger.debug("Killed %s after %s seconds", shlex.join(cmd), timeout)
                return ExecResult(None, stdout or "", stderr or "", timed_out=True)
            except KeyboardInterrupt as exc:
                kill_process_tree(process)
                process.wait()
                raise ExecutionFailedError(
                    f"Execution of command '{describe_command(cmd)}' failed: interrupted",
                    interrupted=True,
                ) from exc
        return ExecResult(process.returncode, stdout or "", stderr or "")


def extract_json_path_value(output: str, json_path: str) -> Any:
    """Evaluate ``json_path`` against JSON ``output``.

    Returns ``None`` when nothing matches, the value for a single match and
    a list of values for several. Raises ``ValueError`` for unparseable
    output or an invalid expression.
    """
    data = parse_lenient_json(output)
    try:
        expression = parse_json_path(json_path)
    except JSONPathError as exc:
        raise ValueError(f"invalid JSONPath expression `{json_path}`: {exc}") from exc
    values = [match.value for match in expression.find(data)]
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values
