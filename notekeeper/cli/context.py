"""
CLI Context.

Global options shared by every command and the glue that runs one
backend call per command invocation.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import typer
from rich.console import Console

from notekeeper.backend.core.exceptions import StorageError
from notekeeper.cli.backends import Backend, open_backend
from notekeeper.cli.render import print_outcome
from notekeeper.organizer.workspace import Outcome

T = TypeVar("T")

console = Console()


@dataclass
class CliState:
    """Options given to the root command."""

    remote: bool = False
    storage_dir: Path | None = None


def get_state(ctx: typer.Context) -> CliState:
    return ctx.ensure_object(CliState)


def run_backend(ctx: typer.Context, action: Callable[[Backend], Awaitable[T]]) -> T:
    """
    Open the selected backend, run `action` against it and close it.

    Unreadable local storage is reported and ends the command with exit code 1.
    """
    state = get_state(ctx)

    async def _run() -> T:
        async with open_backend(remote=state.remote, storage_dir=state.storage_dir) as backend:
            return await action(backend)

    try:
        return asyncio.run(_run())
    except StorageError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1) from e


def require(outcome: Outcome) -> Outcome:
    """Exit with the outcome's message unless it succeeded."""
    if not outcome.ok:
        print_outcome(console, outcome)
        raise typer.Exit(1)
    return outcome


def finish(outcome: Outcome) -> None:
    """Report a mutation and exit non-zero when it was rejected or not saved."""
    print_outcome(console, outcome)
    if not outcome.ok:
        raise typer.Exit(1)


def parse_ids(value: str | None) -> list[int] | None:
    """Parse a comma separated id list such as "1,2,3"."""
    if value is None:
        return None
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError as e:
        raise typer.BadParameter("Expected comma separated ids, e.g. 1,2") from e
