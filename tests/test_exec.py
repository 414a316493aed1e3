from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from support import RecordingTerminal, write

from actionflow.action_reader import read_action_text
from actionflow.actions import Exec
from actionflow.app_constants import ExecSettings
from actionflow.engine import ActionEngine
from actionflow.errors import ExecSetupError, ExecutionFailedError, MissingCommandError, ReadError
from actionflow.runner_utils import extract_json_path_value, run_shell_process
from actionflow.templating import SimpleTemplateEngine


@unittest.skipIf(shutil.which("bash") is None, "bash is required")
class ExecActionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        base = Path(self._tmp.name)
        self.cwd = base / "project"
        self.cwd.mkdir()
        self.command_dir = base / "command"
        self.command_dir.mkdir()
        self.terminal = RecordingTerminal()
        self.engine = ActionEngine(self.terminal)

    def run_yaml(self, text: str, model: dict) -> None:
        files = {self.command_dir / "exec.yaml": read_action_text(text, "exec.yaml")}
        self.engine.run(files, self.cwd, self.command_dir, model)

    def test_command_runs_in_rendered_directory(self) -> None:
        (self.cwd / "work").mkdir()
        self.run_yaml(
            "actions:\n"
            "  - exec:\n"
            "      command: mkdir {{dir-name}}\n"
            "      dir: work\n",
            {"dir-name": "created"},
        )
        self.assertTrue((self.cwd / "work" / "created").is_dir())
        self.assertIn("executed successfully", self.terminal.text)

    def test_stdout_redirect_writes_file(self) -> None:
        write(self.cwd / "listing" / "only-file.yml", "actions: []\n")
        self.run_yaml(
            "actions:\n"
            "  - exec:\n"
            "      command: ls\n"
            '      dir: "{{work-dir}}"\n'
            '      to: "{{output}}"\n',
            {"work-dir": str(self.cwd / "listing"), "output": "out/result"},
        )
        self.assertEqual((self.cwd / "out" / "result").read_text(encoding="utf-8"), "only-file.yml\n")

    def test_stderr_redirect_writes_file(self) -> None:
        self.run_yaml(
            "actions:\n  - exec:\n      command: echo oops 1>&2\n      errto: err.log\n",
            {},
        )
        self.assertEqual((self.cwd / "err.log").read_text(encoding="utf-8"), "oops\n")

    def test_define_extracts_value_and_first_writer_wins(self) -> None:
        model: dict = {"output-file": "phone.txt"}
        self.run_yaml(
            "actions:\n"
            "  - exec:\n"
            "      command: \"echo '{\\\"a\\\": 42}'\"\n"
            "      define:\n"
            "        name: x\n"
            "        json-path: $.a\n"
            "  - exec:\n"
            "      command: \"echo '{\\\"a\\\": 7}'\"\n"
            "      define:\n"
            "        name: x\n"
            "        json-path: $.a\n"
            "  - generate:\n"
            '      to: "{{output-file}}"\n'
            '      text: "value {{x}}"\n',
            model,
        )
        self.assertEqual(model["x"], 42)
        self.assertEqual((self.cwd / "phone.txt").read_text(encoding="utf-8"), "value 42")

    def test_define_tolerates_unquoted_field_names(self) -> None:
        model: dict = {}
        self.run_yaml(
            "actions:\n"
            "  - exec:\n"
            "      command: \"echo '{name: \\\"iPhone\\\", price: 10}'\"\n"
            "      define:\n"
            "        name: phone\n"
            "        json-path: $.name\n",
            model,
        )
        self.assertEqual(model["phone"], "iPhone")

    def test_incomplete_define_is_reported(self) -> None:
        model: dict = {}
        self.run_yaml(
            "actions:\n  - exec:\n      command: echo '{}'\n      define:\n        name: x\n",
            model,
        )
        self.assertNotIn("x", model)
        self.assertIn("exec: define: has a null value", self.terminal.text)

    def test_non_zero_exit_is_reported_and_run_continues(self) -> None:
        self.run_yaml(
            "actions:\n"
            "  - exec:\n      command: echo broken 1>&2; exit 3\n"
            "  - generate:\n      to: after.txt\n      text: still here\n",
            {},
        )
        self.assertIn("exited with value 3", self.terminal.text)
        self.assertIn("stderr = broken", self.terminal.text)
        self.assertTrue((self.cwd / "after.txt").exists())

    def test_undecodable_output_is_replaced_and_run_continues(self) -> None:
        self.run_yaml(
            "actions:\n"
            "  - exec:\n      command: printf '\\xff\\xfe'\n"
            "  - generate:\n      to: after.txt\n      text: still here\n",
            {},
        )
        self.assertIn("executed successfully", self.terminal.text)
        self.assertTrue((self.cwd / "after.txt").exists())

    def test_command_file_first_line_is_rendered(self) -> None:
        write(self.command_dir / "cmd.txt", "echo {{word}} > from-file.txt\necho ignored > second.txt\n")
        self.run_yaml("actions:\n  - exec:\n      command-file: cmd.txt\n", {"word": "hello"})
        self.assertEqual((self.cwd / "from-file.txt").read_text(encoding="utf-8"), "hello\n")
        self.assertFalse((self.cwd / "second.txt").exists())

    def test_missing_command_fails_before_launch(self) -> None:
        with mock.patch("actionflow.engine.run_shell_process") as runner:
            with self.assertRaises(MissingCommandError):
                self.run_yaml("actions:\n  - exec:\n      dir: .\n", {})
            runner.assert_not_called()

    def test_missing_command_file_is_read_error(self) -> None:
        with self.assertRaises(ReadError) as ctx:
            self.run_yaml("actions:\n  - exec:\n      command-file: nope.txt\n", {})
        self.assertIn(str(self.command_dir / "nope.txt"), str(ctx.exception))

    def test_bad_working_directory_is_setup_error(self) -> None:
        with self.assertRaises(ExecSetupError) as ctx:
            self.run_yaml("actions:\n  - exec:\n      command: ls\n      dir: does/not/exist\n", {})
        self.assertIn("does/not/exist", str(ctx.exception))

    def test_timeout_kills_child_and_reports(self) -> None:
        engine = ActionEngine(self.terminal, exec_settings=ExecSettings(shell="bash", timeout_seconds=0.5))
        engine.execute_shell_command(
            Exec(command="sleep 5; touch late.txt"),
            SimpleTemplateEngine(),
            {},
            self.cwd,
            self.command_dir,
        )
        self.assertIn("timed out after 0.5 seconds", self.terminal.text)
        self.assertFalse((self.cwd / "late.txt").exists())


@unittest.skipIf(shutil.which("bash") is None, "bash is required")
class RunnerUtilsTests(unittest.TestCase):
    def test_large_output_on_both_streams_does_not_block(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            script = "head -c 200000 /dev/zero | tr '\\0' a; head -c 200000 /dev/zero | tr '\\0' b 1>&2"
            result = run_shell_process(["bash", "-c", script], Path(tmp), timeout=30)
            self.assertEqual(result.returncode, 0)
            self.assertEqual(len(result.stdout), 200000)
            self.assertEqual(len(result.stderr), 200000)

    def test_missing_shell_is_execution_failure(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ExecutionFailedError):
                run_shell_process(["/nonexistent/shell", "-c", "true"], Path(tmp), timeout=5)

    def test_interrupt_while_waiting(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("subprocess.Popen.communicate", side_effect=KeyboardInterrupt):
                with self.assertRaises(ExecutionFailedError) as ctx:
                    run_shell_process(["bash", "-c", "sleep 5"], Path(tmp), timeout=30)
            self.assertTrue(ctx.exception.interrupted)


class JsonPathTests(unittest.TestCase):
    def test_single_multiple_and_no_match(self) -> None:
        output = '{"items": [{"id": 1}, {"id": 2}], "a": {"b": "c"}}'
        self.assertEqual(extract_json_path_value(output, "$.a.b"), "c")
        self.assertEqual(extract_json_path_value(output, "$.items[*].id"), [1, 2])
        self.assertIsNone(extract_json_path_value(output, "$.missing"))

    def test_filter_expression(self) -> None:
        output = '{"items": [{"n": "a", "p": 1}, {"n": "b", "p": 20}]}'
        self.assertEqual(extract_json_path_value(output, "$.items[?(@.p > 10)].n"), "b")

    def test_unparseable_output(self) -> None:
        with self.assertRaises(ValueError):
            extract_json_path_value("not json at all", "$.a")
        with self.assertRaises(ValueError):
            extract_json_path_value("", "$.a")


if __name__ == "__main__":
    unittest.main()
