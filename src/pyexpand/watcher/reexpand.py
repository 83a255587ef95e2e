from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from pyexpand.core.errors import PyExpandError
from pyexpand.core.expand import Expansion, expand_source, read_source
from pyexpand.core.ports.runner import ProgramRunner
from pyexpand.core.scanner import has_directives
from pyexpand.core.splicer import write_output

logger = logging.getLogger(__name__)


class Reexpander:
    """Change callback that expands modified files in place.

    Files without directives are skipped, and so are change events that leave
    the file holding the bytes we last saw (our own write, or nothing new).
    With ``write=False`` the file is never touched; the result only reaches
    ``on_expanded``.
    """

    def __init__(
        self,
        runner_factory: Callable[[], ProgramRunner],
        on_expanded: Callable[[Path, Expansion], None] | None = None,
        write: bool = True,
    ) -> None:
        self._runner_factory = runner_factory
        self._on_expanded = on_expanded
        self._write = write
        self._last_seen: dict[Path, bytes] = {}

    def remember(self, path: Path, data: bytes) -> None:
        self._last_seen[path.resolve()] = data

    def expand_path(self, path: Path) -> Expansion | None:
        path = path.resolve()
        if not path.is_file():
            return None
        source = read_source(path)
        if self._last_seen.get(path) == source or not has_directives(source):
            return None

        runner = self._runner_factory()
        try:
            expansion = expand_source(source, runner)
        finally:
            runner.cleanup()

        if not self._write:
            self._last_seen[path] = source
        else:
            if expansion.data != source:
                write_output(path, expansion.data)
            self._last_seen[path] = expansion.data
        if self._on_expanded is not None:
            self._on_expanded(path, expansion)
        return expansion

    async def __call__(self, paths: set[Path]) -> None:
        for path in sorted(paths):
            try:
                await asyncio.to_thread(self.expand_path, path)
            except PyExpandError as err:
                logger.error("%s", err.message)
