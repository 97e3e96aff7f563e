"""
Drag-and-Drop Reassignment.

Drag ids encode what is being dragged and where it is dropped:
"note-<id>", "folder-<id>" and the "all-notes" bucket. A drop resolves
to at most one action:

    note   -> all-notes      MoveNote(folder_id=None)
    note   -> folder-<id>    MoveNote(folder_id=id)
    folder -> all-notes      ReparentFolder(parent_id=None)
    folder -> folder-<id>    ReparentFolder(parent_id=id)

Anything else (malformed ids, note targets, a folder dropped on itself)
resolves to None.
"""

import re
from dataclasses import dataclass
from enum import Enum

ALL_NOTES = "all-notes"

_DRAG_ID = re.compile(r"^(note|folder)-(\d+)$")


class DragKind(str, Enum):
    NOTE = "note"
    FOLDER = "folder"
    ALL_NOTES = "all-notes"


@dataclass(frozen=True)
class DragRef:
    kind: DragKind
    id: int | None = None


@dataclass(frozen=True)
class MoveNote:
    note_id: int
    folder_id: int | None


@dataclass(frozen=True)
class ReparentFolder:
    folder_id: int
    parent_id: int | None


DropAction = MoveNote | ReparentFolder


def note_drag_id(note_id: int) -> str:
    return f"note-{note_id}"


def folder_drag_id(folder_id: int) -> str:
    return f"folder-{folder_id}"


def parse_drag_id(value: str) -> DragRef | None:
    """Decode a drag id, returning None when it is not recognized."""
    value = (value or "").strip()
    if value == ALL_NOTES:
        return DragRef(DragKind.ALL_NOTES)
    match = _DRAG_ID.match(value)
    if match is None:
        return None
    return DragRef(DragKind(match.group(1)), int(match.group(2)))


def resolve_drop(source_id: str, target_id: str) -> DropAction | None:
    """Map a source/target pair to the reassignment it stands for."""
    source = parse_drag_id(source_id)
    target = parse_drag_id(target_id)
    if source is None or target is None:
        return None

    if target.kind is DragKind.ALL_NOTES:
        destination = None
    elif target.kind is DragKind.FOLDER:
        destination = target.id
    else:
        return None

    if source.kind is DragKind.NOTE:
        return MoveNote(note_id=source.id, folder_id=destination)
    if source.kind is DragKind.FOLDER:
        if destination == source.id:
            return None
        return ReparentFolder(folder_id=source.id, parent_id=destination)
    return None
