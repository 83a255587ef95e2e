from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import Change, awatch

logger = logging.getLogger(__name__)


class WatchfilesWatcher:
    """Watch a file or directory and trigger a callback with the changed files.

    Deletions are ignored; only paths that were added or modified are passed on.
    A single file is watched through its parent directory.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        path: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
    ) -> None:
        self._path = Path(path)
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._path)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._path)

    def _accepts(self, path: Path) -> bool:
        if self._path.is_dir():
            return True
        return path.resolve() == self._path.resolve()

    async def _watch(self) -> None:
        root = self._path if self._path.is_dir() else self._path.parent
        async for changes in awatch(root):
            paths = {Path(p) for change, p in changes if change != Change.deleted and self._accepts(Path(p))}
            if paths:
                logger.info("Detected changes in %d file(s)", len(paths))
                try:
                    await self._on_change(paths)
                except Exception:
                    logger.exception("Error in watcher callback")
