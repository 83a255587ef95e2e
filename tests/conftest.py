"""Shared fixtures and helpers for tests."""

import shlex
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from pyexpand.models import Program, RunOutput
from pyexpand.runner.memory import InMemoryRunner

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def python_interpreter() -> str:
    """Interpreter command that runs the current Python."""
    return shlex.quote(sys.executable)


@pytest.fixture
def in_tmp_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with *tmp_path* as working directory so temp programs land there."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fake_runner() -> Callable[..., InMemoryRunner]:
    """Factory for runners that answer each program text from a mapping."""

    def make(mapping: dict[bytes, bytes], exit_code: int = 0) -> InMemoryRunner:
        def handler(program: Program) -> RunOutput:
            return RunOutput(output=mapping[program.text], exit_code=exit_code)

        return InMemoryRunner(handler=handler)

    return make


@pytest.fixture
def memory_runner() -> InMemoryRunner:
    return InMemoryRunner()
