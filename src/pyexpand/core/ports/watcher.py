from typing import Protocol


class FileWatcherPort(Protocol):
    """Watches a path and hands changed files to a callback until stopped."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
