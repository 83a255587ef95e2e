from typing import Protocol

from pyexpand.models import Program, RunOutput


class ProgramRunner(Protocol):
    def run(self, program: Program) -> RunOutput: ...

    def cleanup(self) -> None: ...
