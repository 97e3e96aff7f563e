"""
CLI Rendering.

Rich renderables for the folder tree, note lists, labels and single notes.
"""

from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from notekeeper.organizer.entities import FolderNode, Label, Note, NoteStatus
from notekeeper.organizer.filters import NoteSections
from notekeeper.organizer.mutations import ALL_NOTES_NAME
from notekeeper.organizer.workspace import Outcome

PREVIEW_LENGTH = 60

STATUS_STYLES = {
    NoteStatus.ACTIVE: "green",
    NoteStatus.ARCHIVED: "yellow",
    NoteStatus.TRASHED: "red",
}


def _add_children(branch: Tree, nodes: Iterable[FolderNode]) -> None:
    for node in nodes:
        child = branch.add(f"[bold]{node.name}[/bold] [dim]#{node.id}[/dim]")
        _add_children(child, node.children)


def folder_tree(nodes: list[FolderNode]) -> Tree:
    """Folder hierarchy under an All Notes root."""
    tree = Tree(f"[cyan]{ALL_NOTES_NAME}[/cyan]")
    _add_children(tree, nodes)
    return tree


def label_chips(labels: Iterable[Label]) -> Text:
    text = Text()
    for label in labels:
        if text.plain:
            text.append(" ")
        text.append(f"● {label.name}", style=label.color)
    return text


def preview(content: str, length: int = PREVIEW_LENGTH) -> str:
    line = " ".join((content or "").split())
    return line if len(line) <= length else line[: length - 3] + "..."


def notes_table(notes: list[Note], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Preview")
    table.add_column("Labels")
    table.add_column("Updated", style="dim")

    for note in notes:
        table.add_row(
            str(note.id),
            note.title,
            preview(note.content),
            label_chips(note.labels),
            note.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def print_sections(console: Console, sections: NoteSections, title: str) -> None:
    """Print the Pinned section, when there is one, above the other notes."""
    if not sections.pinned and not sections.others:
        console.print(f"[dim]No notes in {title}[/dim]")
        return
    if sections.pinned:
        console.print(notes_table(sections.pinned, "Pinned"))
    if sections.others:
        console.print(notes_table(sections.others, title))


def labels_table(labels: list[Label]) -> Table:
    table = Table(title="Labels", show_header=True)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name")
    table.add_column("Color")

    for label in labels:
        table.add_row(str(label.id), Text(label.name, style=label.color), label.color)
    return table


def note_panel(note: Note) -> Panel:
    style = STATUS_STYLES[note.status]
    header = Text()
    header.append(note.status.value, style=style)
    if note.is_pinned:
        header.append("  pinned", style="bold")
    header.append(f"  folder: {note.folder_id if note.folder_id is not None else ALL_NOTES_NAME}", style="dim")
    if note.labels:
        header.append("\n")
        header.append_text(label_chips(note.labels))

    body = Text()
    body.append_text(header)
    body.append("\n\n")
    body.append(note.content or "")
    return Panel(body, title=f"#{note.id} {note.title}", title_align="left")


def print_outcome(console: Console, outcome: Outcome) -> None:
    """Print the user-visible message of an operation."""
    if not outcome.message:
        return
    if outcome.ok:
        console.print(f"[green]{outcome.message}[/green]")
    else:
        console.print(f"[red]{outcome.message}[/red]")
