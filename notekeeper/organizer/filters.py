"""
Filter Engine.

Computes the visible note list for the current view selection.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from notekeeper.organizer.entities import Note, NoteStatus


@dataclass(frozen=True)
class NoteView:
    """Current selection in the notes view."""

    folder_id: int | None = None
    label_id: int | None = None
    search_term: str = ""
    show_archived: bool = False


@dataclass(frozen=True)
class NoteSections:
    """Visible notes split for rendering."""

    pinned: list[Note] = field(default_factory=list)
    others: list[Note] = field(default_factory=list)

    @property
    def all(self) -> list[Note]:
        return self.pinned + self.others


def _matches_search(note: Note, term: str) -> bool:
    if not term:
        return True
    term = term.lower()
    return term in note.title.lower() or term in (note.content or "").lower()


def is_visible(note: Note, view: NoteView) -> bool:
    """Apply every filter of `view` to a single note."""
    if note.status is NoteStatus.TRASHED:
        return False
    if view.show_archived != (note.status is NoteStatus.ARCHIVED):
        return False
    if not _matches_search(note, view.search_term):
        return False
    # Folder selection is ignored while browsing the archive
    if not view.show_archived and view.folder_id is not None:
        if note.folder_id != view.folder_id:
            return False
    if view.label_id is not None and not note.has_label(view.label_id):
        return False
    return True


def visible_notes(notes: Iterable[Note], view: NoteView) -> list[Note]:
    """
    Filter notes for display, keeping input order.

    Trashed notes never pass. The archived view shows only archived notes
    and ignores the folder selection; the normal view hides them.
    Search is a case-insensitive substring test on title or content.
    Folder matching is exact, subfolders are not included.
    """
    return [note for note in notes if is_visible(note, view)]


def split_pinned(notes: Iterable[Note], view: NoteView) -> NoteSections:
    """Separate pinned notes, except in the archived view."""
    notes = list(notes)
    if view.show_archived:
        return NoteSections(pinned=[], others=notes)
    return NoteSections(
        pinned=[n for n in notes if n.is_pinned],
        others=[n for n in notes if not n.is_pinned],
    )


def trashed_notes(notes: Iterable[Note]) -> list[Note]:
    """Notes currently in the trash."""
    return [n for n in notes if n.status is NoteStatus.TRASHED]
