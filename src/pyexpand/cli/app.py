import asyncio
import logging
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from typer.core import TyperCommand

from pyexpand.core.config import INTERPRETER_ENV, TEMP_FILE_ENV, Settings, get_settings
from pyexpand.core.errors import ArgError, PyExpandError
from pyexpand.core.expand import Expansion, expand_file
from pyexpand.runner.subprocess_runner import SubprocessRunner
from pyexpand.watcher.reexpand import Reexpander
from pyexpand.watcher.watchfiles_adapter import WatchfilesWatcher

USAGE = "Usage: pyexpand <file>"

app = typer.Typer(
    name="pyexpand",
    help="Expand /*.py ... */ directives in a source file in place.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console(soft_wrap=True)


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("pyexpand")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _resolve_settings(interpreter: str | None, temp_file: str | None) -> Settings:
    settings = get_settings()
    return settings.model_copy(
        update={
            "interpreter": interpreter or settings.interpreter,
            "temp_file": temp_file or settings.temp_file,
        }
    )


def _single_path(paths: list[str] | None) -> Path:
    if not paths or len(paths) != 1:
        raise ArgError(USAGE)
    return Path(paths[0])


def _report_failures(path: Path, expansion: Expansion) -> None:
    for failure in expansion.failures:
        console.print(
            f"Directive {failure.index + 1} in {escape(str(path))} exited with code {failure.exit_code}",
            highlight=False,
        )


async def _watch(path: Path, reexpander: Reexpander) -> None:
    watcher = WatchfilesWatcher(path, reexpander)
    await watcher.start()
    try:
        await asyncio.Event().wait()
    finally:
        await watcher.stop()


class _ExpandCommand(TyperCommand):
    """Malformed command lines get the one-line usage text and status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError:
            console.print(USAGE, highlight=False)
            ctx.exit(1)


@app.command(cls=_ExpandCommand)
def expand(
    paths: Annotated[list[str] | None, typer.Argument(help="File to expand in place.", show_default=False)] = None,
    interpreter: Annotated[
        str | None,
        typer.Option(help=f"Interpreter command [env: {INTERPRETER_ENV}, default: py].", show_default=False),
    ] = None,
    temp_file: Annotated[
        str | None,
        typer.Option(help=f"Temporary program path [env: {TEMP_FILE_ENV}].", show_default=False),
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the result instead of writing it.")] = False,
    watch: Annotated[bool, typer.Option("--watch", help="Re-expand whenever the file (or directory) changes.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Evaluate every /*.py ... */ directive and splice its output after the comment."""
    _configure_logging(verbose)
    settings = _resolve_settings(interpreter, temp_file)

    def make_runner() -> SubprocessRunner:
        return SubprocessRunner(settings.interpreter, settings.temp_file)

    def on_expanded(changed: Path, expansion: Expansion) -> None:
        _report_failures(changed, expansion)
        if dry_run:
            typer.echo(expansion.data, nl=False)

    reexpander = Reexpander(make_runner, on_expanded=on_expanded, write=not dry_run)
    try:
        path = _single_path(paths)
        if not (watch and path.is_dir()):
            expansion = expand_file(path, make_runner(), write=not dry_run)
            _report_failures(path, expansion)
            if dry_run:
                typer.echo(expansion.data, nl=False)
            else:
                reexpander.remember(path, expansion.data)
    except PyExpandError as err:
        console.print(escape(err.message), highlight=False)
        raise typer.Exit(1) from None

    if not watch:
        return

    console.print(f"[green]Watching[/green] {escape(str(path))} (Ctrl+C to stop)")
    try:
        asyncio.run(_watch(path, reexpander))
    except KeyboardInterrupt:
        console.print("Stopped watching.")


def main() -> None:
    app()
