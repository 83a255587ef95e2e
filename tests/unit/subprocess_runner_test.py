"""Tests for the subprocess runner against the running Python interpreter."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from pyexpand.core.errors import InterpreterLaunchFailed, TempWriteFailed
from pyexpand.core.expand import expand_file
from pyexpand.core.transformer import transform
from pyexpand.models import Program
from pyexpand.runner.subprocess_runner import SubprocessRunner


def _program(text: str) -> Program:
    return Program(text=text.encode("utf-8"), is_multiline=False)


def test_runs_single_expression(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter)
    result = runner.run(transform(b" 1 + 2 "))

    assert result.exit_code == 0
    assert result.output.rstrip(b"\r\n") == b"3"
    assert (in_tmp_cwd / "__pyexpand_temp.py").read_bytes() == b"print( 1 + 2 )\n\n"


def test_runs_multi_statement(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter)
    result = runner.run(transform(b"\n\ta = 10\n\treturn a*2\n"))
    assert result.output.rstrip(b"\r\n") == b"20"


def test_stderr_follows_stdout(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter)
    program = _program("import sys\nsys.stderr.write('err')\nsys.stderr.flush()\nsys.stdout.write('out')\n")
    result = runner.run(program)
    assert result.output == b"outerr"


def test_large_output_on_both_streams(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter)
    program = _program("import sys\nsys.stdout.write('x' * 300000)\nsys.stderr.write('y' * 300000)\n")
    result = runner.run(program)
    assert result.output == b"x" * 300000 + b"y" * 300000


def test_non_zero_exit_is_returned(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter)
    result = runner.run(_program("import sys\nsys.stdout.write('partial')\nsys.exit(3)\n"))
    assert result.exit_code == 3
    assert result.output == b"partial"


def test_interpreter_error_is_captured(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter)
    result = runner.run(transform(b" 1/0 "))
    assert result.exit_code == 1
    assert b"ZeroDivisionError" in result.output


def test_missing_interpreter_fails_to_launch(in_tmp_cwd: Path) -> None:
    runner = SubprocessRunner("pyexpand-no-such-interpreter")
    with pytest.raises(InterpreterLaunchFailed, match="pyexpand-no-such-interpreter"):
        runner.run(_program("print(1)"))


def test_unwritable_temp_path(tmp_path: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(python_interpreter, tmp_path / "missing" / "prog.py")
    with pytest.raises(TempWriteFailed, match="temporary python file"):
        runner.run(_program("print(1)"))


@pytest.mark.parametrize("command", ["   ", "python \"unterminated"])
def test_invalid_interpreter_command_rejected(command: str) -> None:
    with pytest.raises(InterpreterLaunchFailed):
        SubprocessRunner(command)


def test_interpreter_arguments_are_split(in_tmp_cwd: Path, python_interpreter: str) -> None:
    runner = SubprocessRunner(f"{python_interpreter} -S")
    result = runner.run(_program("import sys\nsys.stdout.write(str(sys.flags.no_site))\n"))
    assert result.output == b"1"


def test_context_manager_removes_temp_file(in_tmp_cwd: Path, python_interpreter: str) -> None:
    with SubprocessRunner(python_interpreter) as runner:
        runner.run(_program("print(1)"))
        assert runner.temp_path.exists()
    assert not runner.temp_path.exists()


def test_expand_file_with_real_interpreter(in_tmp_cwd: Path, python_interpreter: str) -> None:
    target = in_tmp_cwd / "consts.h"
    target.write_bytes(b"#define N /*.py 1 + 2 */ old /**/\n")

    expansion = expand_file(target, SubprocessRunner(python_interpreter))

    newline = b"\n" if sys.platform != "win32" else b""
    assert target.read_bytes() == b"#define N /*.py 1 + 2 */ 3" + newline + b" /**/\n"
    assert expansion.failures == []
    assert not (in_tmp_cwd / "__pyexpand_temp.py").exists()
