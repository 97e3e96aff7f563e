"""
Note Commands.

Listing, editing and lifecycle actions for notes.
"""

from pathlib import Path
from typing import Any, Optional

import typer
from rich.table import Table

from notekeeper.cli.context import console, finish, parse_ids, require, run_backend
from notekeeper.cli.render import note_panel, notes_table, print_sections
from notekeeper.organizer.filters import NoteView

app = typer.Typer(help="Note commands")


@app.command("list")
def list_notes(
    ctx: typer.Context,
    folder: Optional[int] = typer.Option(None, "--folder", "-f", help="Only notes in this folder"),
    label: Optional[int] = typer.Option(None, "--label", "-l", help="Only notes with this label"),
    search: str = typer.Option("", "--search", "-s", help="Title or content substring"),
    archived: bool = typer.Option(False, "--archived", "-a", help="Show the archive"),
    trash: bool = typer.Option(False, "--trash", "-t", help="Show the trash"),
) -> None:
    """
    List the notes of a view.

    Pinned notes are listed first, except in the archive.

    Examples:
        notekeeper notes list
        notekeeper notes list --folder 2 --search meeting
        notekeeper notes list --archived
        notekeeper notes list --trash
    """
    if trash:
        outcome = require(run_backend(ctx, lambda backend: backend.trash()))
        if outcome.value:
            console.print(notes_table(outcome.value, "Trash"))
        else:
            console.print("[dim]Trash is empty[/dim]")
        return

    view = NoteView(folder_id=folder, label_id=label, search_term=search, show_archived=archived)
    outcome = require(run_backend(ctx, lambda backend: backend.visible(view)))
    print_sections(console, outcome.value, "Archive" if archived else "Notes")


@app.command()
def show(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Show a note with its content."""
    outcome = require(run_backend(ctx, lambda backend: backend.get_note(note_id)))
    console.print(note_panel(outcome.value))


@app.command()
def stats(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Show line, word and character counts of a note."""
    outcome = require(run_backend(ctx, lambda backend: backend.stats(note_id)))
    counts = outcome.value

    table = Table(title=f"Note #{note_id}", show_header=True)
    table.add_column("Lines", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Characters", justify="right")
    table.add_row(str(counts.lines), str(counts.words), str(counts.characters))
    console.print(table)


@app.command()
def export(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    fmt: str = typer.Option("txt", "--format", "-f", help="txt, md, html, csv or json"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File or directory to write"),
) -> None:
    """
    Export a note's content.

    Without --output the rendered content is printed.

    Examples:
        notekeeper notes export 3 --format html -o exports/
    """
    outcome = require(run_backend(ctx, lambda backend: backend.export(note_id, fmt)))
    exported = outcome.value

    if output is None:
        typer.echo(exported.body)
        return

    target = output / exported.filename if output.is_dir() else output
    target.write_text(exported.body, encoding="utf-8")
    console.print(f"[green]Exported to {target}[/green]")


@app.command()
def create(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Note title"),
    content: str = typer.Option("", "--content", "-c", help="Note content"),
    folder: Optional[int] = typer.Option(None, "--folder", "-f", help="Folder ID"),
    labels: Optional[str] = typer.Option(None, "--labels", "-l", help="Label IDs, e.g. 1,2"),
    pin: bool = typer.Option(False, "--pin", help="Pin the note"),
) -> None:
    """
    Create a note.

    Examples:
        notekeeper notes create "Groceries" -c "milk, eggs" --folder 1 --labels 2
    """
    label_ids = parse_ids(labels)
    outcome = run_backend(
        ctx,
        lambda backend: backend.create_note(title, content, folder, label_ids, pin),
    )
    finish(outcome)
    if outcome.value is not None:
        console.print(f"[dim]ID: {outcome.value.id}[/dim]")


@app.command()
def edit(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New content"),
    folder: Optional[int] = typer.Option(None, "--folder", "-f", help="New folder ID"),
    clear_folder: bool = typer.Option(False, "--clear-folder", help="File the note under All Notes"),
    labels: Optional[str] = typer.Option(None, "--labels", "-l", help="Replace labels, e.g. 1,2"),
) -> None:
    """
    Update a note's title, content, folder or labels.

    Examples:
        notekeeper notes edit 3 --title "Groceries (week 12)"
        notekeeper notes edit 3 --labels ""
    """
    changes: dict[str, Any] = {}
    if title is not None:
        changes["title"] = title
    if content is not None:
        changes["content"] = content
    if clear_folder:
        changes["folder_id"] = None
    elif folder is not None:
        changes["folder_id"] = folder
    if labels is not None:
        changes["label_ids"] = parse_ids(labels)

    if not changes:
        console.print("[yellow]Nothing to update[/yellow]")
        raise typer.Exit(1)

    finish(run_backend(ctx, lambda backend: backend.update_note(note_id, **changes)))


@app.command()
def move(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    folder: Optional[int] = typer.Option(None, "--folder", "-f", help="Target folder; omit for All Notes"),
) -> None:
    """Move a note to a folder, or to All Notes."""
    finish(run_backend(ctx, lambda backend: backend.move_note(note_id, folder)))


@app.command()
def duplicate(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Copy a note into a new active note titled "<title> (Copy)"."""
    outcome = run_backend(ctx, lambda backend: backend.duplicate_note(note_id))
    finish(outcome)
    if outcome.value is not None:
        console.print(f"[dim]ID: {outcome.value.id}[/dim]")


@app.command()
def pin(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Pin a note."""
    finish(run_backend(ctx, lambda backend: backend.set_pinned(note_id, True)))


@app.command()
def unpin(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Unpin a note."""
    finish(run_backend(ctx, lambda backend: backend.set_pinned(note_id, False)))


@app.command()
def archive(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Archive a note."""
    finish(run_backend(ctx, lambda backend: backend.archive_note(note_id)))


@app.command()
def unarchive(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Bring a note back from the archive."""
    finish(run_backend(ctx, lambda backend: backend.unarchive_note(note_id)))


@app.command()
def trash(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Move a note to the trash."""
    finish(run_backend(ctx, lambda backend: backend.trash_note(note_id)))


@app.command()
def restore(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")) -> None:
    """Restore a note from the trash."""
    finish(run_backend(ctx, lambda backend: backend.restore_note(note_id)))


@app.command()
def purge(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a note permanently."""
    if not yes and not typer.confirm("Delete this note permanently?"):
        console.print("[dim]Cancelled[/dim]")
        return
    finish(run_backend(ctx, lambda backend: backend.purge_note(note_id)))


@app.command("label")
def add_label(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    label_id: int = typer.Argument(..., help="Label ID"),
) -> None:
    """Attach a label to a note."""
    finish(run_backend(ctx, lambda backend: backend.add_label(note_id, label_id)))


@app.command("unlabel")
def remove_label(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    label_id: int = typer.Argument(..., help="Label ID"),
) -> None:
    """Detach a label from a note."""
    finish(run_backend(ctx, lambda backend: backend.remove_label(note_id, label_id)))
