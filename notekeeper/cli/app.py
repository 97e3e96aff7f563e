"""
Notekeeper CLI.

Command-line client for notes, folders and labels.
Built with Typer for type-safe commands and Rich for formatted output.

Works against a local store (default) or a running server (--remote).

Usage:
    notekeeper --help

    # Notes
    notekeeper notes create "Groceries" -c "milk, eggs"
    notekeeper notes list --folder 1
    notekeeper notes pin 3
    notekeeper notes export 3 --format md -o note.md

    # Folders and labels
    notekeeper folders create Work
    notekeeper folders tree
    notekeeper labels create urgent --color "#ff0000"

    # Drag and drop
    notekeeper drop note-3 folder-1
    notekeeper drop note-3 all-notes

    # Server mode
    notekeeper server start
    notekeeper --remote notes list

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --remote          Use the REST API instead of the local store
    --storage DIR     Local store directory
"""

from pathlib import Path
from typing import Optional

import typer

from notekeeper.backend.core.config import find_project_root
from notekeeper.backend.core.logging import setup_logging
from notekeeper.cli.commands import (
    db_app,
    folders_app,
    health_app,
    labels_app,
    notes_app,
    server_app,
)
from notekeeper.cli.context import console, finish, get_state, run_backend

app = typer.Typer(
    name="notekeeper",
    help="Notekeeper CLI - notes, folders, labels, archive and trash.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(notes_app, name="notes")
app.add_typer(folders_app, name="folders")
app.add_typer(labels_app, name="labels")
app.add_typer(server_app, name="server")
app.add_typer(health_app, name="health")
app.add_typer(db_app, name="db")


@app.command()
def drop(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Dragged item: note-<id> or folder-<id>"),
    target: str = typer.Argument(..., help="Drop target: folder-<id> or all-notes"),
) -> None:
    """
    Drop a note or folder onto a folder or onto All Notes.

    Examples:
        notekeeper drop note-3 folder-1
        notekeeper drop folder-4 all-notes
    """
    finish(run_backend(ctx, lambda backend: backend.drop(source, target)))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
    remote: bool = typer.Option(
        False,
        "--remote",
        help="Use the REST API of a running server",
    ),
    storage: Optional[Path] = typer.Option(
        None,
        "--storage",
        help="Local store directory (defaults to workspace.storage_dir)",
    ),
) -> None:
    """
    Notekeeper CLI.

    Notes, folders and labels from the terminal, stored locally or on a server.
    """
    try:
        find_project_root()
    except RuntimeError as e:
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1) from e

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="ERROR", format_type="console")

    state = get_state(ctx)
    state.remote = remote
    state.storage_dir = storage


if __name__ == "__main__":
    app()
