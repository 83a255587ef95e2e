import logging
from dataclasses import dataclass, field
from pathlib import Path

from pyexpand.core.errors import ReadInputFailed
from pyexpand.core.normalizer import normalize
from pyexpand.core.ports.runner import ProgramRunner
from pyexpand.core.scanner import scan
from pyexpand.core.splicer import render, write_output
from pyexpand.core.transformer import transform
from pyexpand.models import ExpansionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpansionFailure:
    index: int
    exit_code: int


@dataclass
class Expansion:
    data: bytes
    results: list[ExpansionResult] = field(default_factory=list)

    @property
    def failures(self) -> list[ExpansionFailure]:
        return [
            ExpansionFailure(index=i, exit_code=result.exit_code)
            for i, result in enumerate(self.results)
            if result.exit_code != 0
        ]


def expand_source(source: bytes, runner: ProgramRunner) -> Expansion:
    """Run every directive in *source* and return the rewritten bytes."""
    scanned = scan(source)
    results: list[ExpansionResult] = []

    for i, directive in enumerate(scanned.directives):
        program = transform(directive.body(source))
        logger.debug(
            "Directive %d at byte %d is %s",
            i,
            directive.open_start,
            "multi-statement" if program.is_multiline else "single-expression",
        )
        result = normalize(program, runner.run(program))
        if result.exit_code != 0:
            logger.info("Directive %d exited with code %d", i, result.exit_code)
        results.append(result)

    return Expansion(data=render(source, scanned.kept_ranges, results), results=results)


def read_source(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ReadInputFailed(f"Failed to read file '{path}'!") from exc


def expand_file(path: str | Path, runner: ProgramRunner, write: bool = True) -> Expansion:
    """Expand *path* in place. The runner's temp file is removed on every path out."""
    file_path = Path(path)
    try:
        source = read_source(file_path)
        expansion = expand_source(source, runner)
        if write:
            write_output(file_path, expansion.data)
            logger.info("Expanded %d directive(s) in %s", len(expansion.results), file_path)
    finally:
        runner.cleanup()
    return expansion
