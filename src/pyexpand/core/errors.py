"""Fatal errors raised by the expansion pipeline.

Every error carries a single-line ASCII message; the CLI prints it and exits
with status 1. A non-zero interpreter exit is not an error.
"""

from __future__ import annotations


class PyExpandError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ArgError(PyExpandError):
    pass


class ReadInputFailed(PyExpandError):
    pass


class TempWriteFailed(PyExpandError):
    pass


class InterpreterLaunchFailed(PyExpandError):
    pass


class OutputWriteFailed(PyExpandError):
    pass
