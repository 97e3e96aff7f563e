"""
Folder Commands.

Commands for the folder hierarchy.
"""

from typing import Optional

import typer

from notekeeper.cli.context import console, finish, require, run_backend
from notekeeper.cli.render import folder_tree

app = typer.Typer(help="Folder commands")

DELETE_PROMPT = (
    "This folder contains notes. Deleting it will move all associated notes "
    "to the trash. Continue?"
)


@app.command()
def tree(ctx: typer.Context) -> None:
    """Show the folder hierarchy."""
    outcome = require(run_backend(ctx, lambda backend: backend.folder_tree()))
    console.print(folder_tree(outcome.value))


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Folder name"),
    parent: Optional[int] = typer.Option(None, "--parent", "-p", help="Parent folder ID"),
) -> None:
    """
    Create a folder.

    Examples:
        notekeeper folders create Work
        notekeeper folders create Meetings --parent 1
    """
    outcome = run_backend(ctx, lambda backend: backend.create_folder(name, parent))
    finish(outcome)
    if outcome.value is not None:
        console.print(f"[dim]ID: {outcome.value.id}[/dim]")


@app.command()
def rename(
    ctx: typer.Context,
    folder_id: int = typer.Argument(..., help="Folder ID"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a folder."""
    finish(run_backend(ctx, lambda backend: backend.rename_folder(folder_id, name)))


@app.command()
def move(
    ctx: typer.Context,
    folder_id: int = typer.Argument(..., help="Folder ID"),
    parent: Optional[int] = typer.Option(None, "--parent", "-p", help="New parent; omit for top level"),
) -> None:
    """Move a folder under another folder, or to the top level."""
    finish(run_backend(ctx, lambda backend: backend.move_folder(folder_id, parent)))


@app.command()
def delete(
    ctx: typer.Context,
    folder_id: int = typer.Argument(..., help="Folder ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """
    Delete a folder.

    Notes in the folder are moved to the trash after confirmation.
    Subfolders move up to the deleted folder's parent.
    """

    def confirm(note_count: int) -> bool:
        return yes or typer.confirm(DELETE_PROMPT)

    finish(run_backend(ctx, lambda backend: backend.delete_folder(folder_id, confirm)))
