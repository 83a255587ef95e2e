from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from types import TracebackType

from pyexpand.core.config import DEFAULT_INTERPRETER, DEFAULT_TEMP_FILE
from pyexpand.core.errors import InterpreterLaunchFailed, TempWriteFailed
from pyexpand.models import Program, RunOutput

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Run generated programs with an external interpreter.

    Each program is written to a fixed temp path which is reused for every
    directive of a run; ``cleanup()`` removes it. Stdout and stderr are
    drained concurrently and returned as one stream, stdout first.

    Implements the ``ProgramRunner`` protocol.
    """

    def __init__(
        self,
        interpreter: str = DEFAULT_INTERPRETER,
        temp_path: str | Path = DEFAULT_TEMP_FILE,
    ) -> None:
        try:
            self._command = shlex.split(interpreter, posix=os.name != "nt")
        except ValueError as exc:
            raise InterpreterLaunchFailed(f"Invalid interpreter command: {interpreter}") from exc
        if not self._command:
            raise InterpreterLaunchFailed("Interpreter command must not be empty.")
        self._temp_path = Path(temp_path)

    @property
    def temp_path(self) -> Path:
        return self._temp_path

    def _write_program(self, program: Program) -> None:
        try:
            self._temp_path.write_bytes(program.text + b"\n")
        except OSError as exc:
            raise TempWriteFailed(
                "Failed to create a temporary python file for evaluating python expressions!"
            ) from exc

    def run(self, program: Program) -> RunOutput:
        self._write_program(program)
        command = [*self._command, str(self._temp_path)]
        logger.debug("Running %s", shlex.join(command))
        try:
            # stdin stays inherited; both pipes are drained together by communicate()
            result = subprocess.run(command, check=False, capture_output=True)
        except OSError as exc:
            raise InterpreterLaunchFailed(
                f"Failed to call '{self._command[0]}'. Do you have python installed?"
            ) from exc

        output = result.stdout + result.stderr
        exit_code = result.returncode & 0xFFFFFFFF
        logger.debug("Interpreter exit code: %d", exit_code)
        logger.debug("Interpreter output: %r", output)
        return RunOutput(output=output, exit_code=exit_code)

    def cleanup(self) -> None:
        self._temp_path.unlink(missing_ok=True)

    def __enter__(self) -> SubprocessRunner:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
