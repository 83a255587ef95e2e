from __future__ import annotations

from collections.abc import Callable, Iterable

from pyexpand.models import Program, RunOutput


class InMemoryRunner:
    """Program runner that never spawns a process.

    Outputs are served in order from *outputs*, or produced by *handler* when
    one is given. Every program received is recorded in ``programs``.
    """

    def __init__(
        self,
        outputs: Iterable[RunOutput | bytes] = (),
        handler: Callable[[Program], RunOutput] | None = None,
    ) -> None:
        self._outputs = [o if isinstance(o, RunOutput) else RunOutput(output=o, exit_code=0) for o in outputs]
        self._handler = handler
        self.programs: list[Program] = []
        self.cleanup_calls = 0

    def run(self, program: Program) -> RunOutput:
        self.programs.append(program)
        if self._handler is not None:
            return self._handler(program)
        if not self._outputs:
            return RunOutput(output=b"", exit_code=0)
        return self._outputs.pop(0)

    def cleanup(self) -> None:
        self.cleanup_calls += 1
