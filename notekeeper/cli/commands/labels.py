"""
Label Commands.
"""

from typing import Any, Optional

import typer

from notekeeper.cli.context import console, finish, require, run_backend
from notekeeper.cli.render import labels_table

app = typer.Typer(help="Label commands")


@app.command("list")
def list_labels(ctx: typer.Context) -> None:
    """List labels."""
    outcome = require(run_backend(ctx, lambda backend: backend.list_labels()))
    if not outcome.value:
        console.print("[dim]No labels[/dim]")
        return
    console.print(labels_table(outcome.value))


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Label name"),
    color: Optional[str] = typer.Option(None, "--color", "-c", help="Hex color, e.g. #ff8800"),
) -> None:
    """Create a label."""
    outcome = run_backend(ctx, lambda backend: backend.create_label(name, color))
    finish(outcome)
    if outcome.value is not None:
        console.print(f"[dim]ID: {outcome.value.id}[/dim]")


@app.command()
def edit(
    ctx: typer.Context,
    label_id: int = typer.Argument(..., help="Label ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    color: Optional[str] = typer.Option(None, "--color", "-c", help="New color"),
) -> None:
    """Rename or recolor a label."""
    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if color is not None:
        changes["color"] = color
    if not changes:
        console.print("[yellow]Nothing to update[/yellow]")
        raise typer.Exit(1)

    finish(run_backend(ctx, lambda backend: backend.update_label(label_id, **changes)))


@app.command()
def delete(ctx: typer.Context, label_id: int = typer.Argument(..., help="Label ID")) -> None:
    """Delete a label and detach it from every note."""
    finish(run_backend(ctx, lambda backend: backend.delete_label(label_id)))
