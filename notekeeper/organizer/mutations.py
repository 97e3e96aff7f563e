"""
Mutation Operations.

Pure functions over a Snapshot. Each returns a Change holding the new
snapshot, the affected entity and the confirmation message shown to the
user. Rule violations raise NotFoundError, ValidationError or ConflictError;
nothing is modified in that case.

Usage:
    from notekeeper.organizer import mutations

    change = mutations.create_folder(snapshot, "Work")
    snapshot = change.snapshot
    print(change.message)  # "Folder created"
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from notekeeper.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from notekeeper.backend.core.utils import utc_now
from notekeeper.organizer.entities import (
    DEFAULT_LABEL_COLOR,
    Folder,
    Label,
    Note,
    NoteStatus,
    Snapshot,
)
from notekeeper.organizer.hierarchy import descendant_ids

TITLE_MAX_LENGTH = 255
FOLDER_NAME_MAX_LENGTH = 255
LABEL_NAME_MAX_LENGTH = 50
COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
COPY_SUFFIX = " (Copy)"
ALL_NOTES_NAME = "All Notes"

STATUS_FIELDS = ("status", "is_archived", "is_trashed")
NOTE_FIELDS = frozenset({"title", "content", "folder_id", "is_pinned", "label_ids", *STATUS_FIELDS})

ConfirmCallback = Callable[[int], bool]


@dataclass(frozen=True)
class Change:
    """Result of a mutation. `snapshot` is the input object when nothing changed."""

    snapshot: Snapshot
    value: Any
    message: str


def next_id(items: Iterable[Any]) -> int:
    """Next integer id: one more than the largest existing id, starting at 1."""
    return max((item.id for item in items), default=0) + 1


def copy_title(title: str) -> str:
    return f"{title}{COPY_SUFFIX}"


def would_create_cycle(folders: Iterable[Folder], folder_id: int, parent_id: int | None) -> bool:
    """True when placing `folder_id` under `parent_id` makes it its own ancestor."""
    if parent_id is None:
        return False
    if parent_id == folder_id:
        return True
    return parent_id in descendant_ids(folders, folder_id)


def resolve_status(
    current: NoteStatus,
    status: NoteStatus | str | None = None,
    is_archived: bool | None = None,
    is_trashed: bool | None = None,
) -> NoteStatus:
    """
    Status a note ends up in after a field update.

    An explicit `status` wins over the boolean flags. The flags are
    relative to `current`: `is_trashed=False` only takes a note out of
    the trash and `is_archived=False` only brings back an archived note.
    Archiving a note that is in the trash is rejected either way.

    Raises:
        ValidationError: On an unknown status or an archive of a trashed note
    """
    if status is not None:
        try:
            target = NoteStatus(status)
        except ValueError as e:
            raise ValidationError("Invalid note status", details={"status": status}) from e
    elif is_trashed:
        return NoteStatus.TRASHED
    else:
        target = current
        if is_trashed is False and target is NoteStatus.TRASHED:
            target = NoteStatus.ACTIVE
        if is_archived:
            target = NoteStatus.ARCHIVED
        elif is_archived is False and target is NoteStatus.ARCHIVED:
            target = NoteStatus.ACTIVE

    if target is NoteStatus.ARCHIVED and current is NoteStatus.TRASHED and is_trashed is not False:
        raise ValidationError("Restore the note from trash before archiving it")
    return target


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _clean_text(value: str, field_name: str, max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(
            f"{field_name.capitalize()} is required",
            details={field_name: "Must not be empty"},
        )
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{field_name.capitalize()} too long",
            details={field_name: f"Maximum length is {max_length}"},
        )
    return cleaned


def _check_color(color: str) -> str:
    if not COLOR_PATTERN.match(color or ""):
        raise ValidationError(
            "Invalid label color",
            details={"color": "Expected a hex color like #808080"},
        )
    return color


def _require_folder(snapshot: Snapshot, folder_id: int) -> Folder:
    folder = snapshot.folder(folder_id)
    if folder is None:
        raise NotFoundError("Folder not found")
    return folder


def _require_note(snapshot: Snapshot, note_id: int) -> Note:
    note = snapshot.note(note_id)
    if note is None:
        raise NotFoundError("Note not found")
    return note


def _require_label(snapshot: Snapshot, label_id: int) -> Label:
    label = snapshot.label(label_id)
    if label is None:
        raise NotFoundError("Label not found")
    return label


def _check_parent(snapshot: Snapshot, folder_id: int | None, parent_id: int | None) -> None:
    if parent_id is None:
        return
    if snapshot.folder(parent_id) is None:
        raise ValidationError(
            "Parent folder does not exist",
            details={"parent_id": parent_id},
        )
    if folder_id is not None and would_create_cycle(snapshot.folders, folder_id, parent_id):
        raise ValidationError(
            "A folder cannot be moved into itself or one of its subfolders",
            details={"parent_id": parent_id},
        )


def _check_folder_ref(snapshot: Snapshot, folder_id: int | None) -> None:
    if folder_id is not None and snapshot.folder(folder_id) is None:
        raise ValidationError("Folder does not exist", details={"folder_id": folder_id})


def _resolve_labels(snapshot: Snapshot, label_ids: Iterable[int]) -> tuple[Label, ...]:
    labels: list[Label] = []
    missing: list[int] = []
    for label_id in dict.fromkeys(label_ids):
        label = snapshot.label(label_id)
        if label is None:
            missing.append(label_id)
        else:
            labels.append(label)
    if missing:
        raise ValidationError("Unknown labels", details={"labels": missing})
    return tuple(labels)


def _unique_label_name(snapshot: Snapshot, name: str, label_id: int | None = None) -> None:
    for label in snapshot.labels:
        if label.name == name and label.id != label_id:
            raise ConflictError("Label name already exists")


def _replace(items: tuple, updated: Any) -> tuple:
    return tuple(updated if item.id == updated.id else item for item in items)


def _without(items: tuple, item_id: int) -> tuple:
    return tuple(item for item in items if item.id != item_id)


def _with_note(snapshot: Snapshot, note: Note) -> Snapshot:
    return snapshot.model_copy(update={"notes": _replace(snapshot.notes, note)})


def _with_folder(snapshot: Snapshot, folder: Folder) -> Snapshot:
    return snapshot.model_copy(update={"folders": _replace(snapshot.folders, folder)})


def _folder_name(snapshot: Snapshot, folder_id: int | None) -> str:
    if folder_id is None:
        return ALL_NOTES_NAME
    folder = snapshot.folder(folder_id)
    return folder.name if folder is not None else ALL_NOTES_NAME


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


def create_folder(
    snapshot: Snapshot,
    name: str,
    parent_id: int | None = None,
    now: datetime | None = None,
) -> Change:
    """Create a folder at the root or under an existing parent."""
    now = now or utc_now()
    name = _clean_text(name, "name", FOLDER_NAME_MAX_LENGTH)
    _check_parent(snapshot, None, parent_id)

    folder = Folder(
        id=next_id(snapshot.folders),
        name=name,
        parent_id=parent_id,
        created_at=now,
        updated_at=now,
    )
    new = snapshot.model_copy(update={"folders": snapshot.folders + (folder,)})
    return Change(new, folder, "Folder created")


def update_folder(
    snapshot: Snapshot,
    folder_id: int,
    now: datetime | None = None,
    **changes: Any,
) -> Change:
    """Apply `name` and/or `parent_id` changes to a folder."""
    unknown = set(changes) - {"name", "parent_id"}
    if unknown:
        raise ValidationError("Unknown folder fields", details={"fields": sorted(unknown)})

    folder = _require_folder(snapshot, folder_id)
    update: dict[str, Any] = {"updated_at": now or utc_now()}
    if "name" in changes:
        update["name"] = _clean_text(changes["name"], "name", FOLDER_NAME_MAX_LENGTH)
    if "parent_id" in changes:
        _check_parent(snapshot, folder_id, changes["parent_id"])
        update["parent_id"] = changes["parent_id"]

    updated = folder.model_copy(update=update)
    return Change(_with_folder(snapshot, updated), updated, "Folder updated")


def rename_folder(
    snapshot: Snapshot,
    folder_id: int,
    name: str,
    now: datetime | None = None,
) -> Change:
    change = update_folder(snapshot, folder_id, now=now, name=name)
    return Change(change.snapshot, change.value, "Folder renamed")


def move_folder(
    snapshot: Snapshot,
    folder_id: int,
    parent_id: int | None,
    now: datetime | None = None,
) -> Change:
    """Reparent a folder; `None` makes it a root folder."""
    folder = _require_folder(snapshot, folder_id)
    if folder.parent_id == parent_id:
        return Change(snapshot, folder, "Folder moved")
    change = update_folder(snapshot, folder_id, now=now, parent_id=parent_id)
    return Change(change.snapshot, change.value, "Folder moved")


def delete_folder(
    snapshot: Snapshot,
    folder_id: int,
    confirm: ConfirmCallback | None = None,
    now: datetime | None = None,
) -> Change:
    """
    Delete a folder.

    Notes filed in the folder are moved to the trash with their folder
    cleared. When there are such notes, `confirm` is called with their
    count first and a refusal leaves everything untouched. Direct child
    folders move up to the deleted folder's parent.

    Returns:
        Change whose value is the number of notes moved to the trash
    """
    folder = _require_folder(snapshot, folder_id)
    affected = snapshot.notes_in_folder(folder_id)

    if affected and confirm is not None and not confirm(len(affected)):
        return Change(snapshot, 0, "Folder deletion cancelled")

    now = now or utc_now()
    notes = tuple(
        note.model_copy(update={
            "status": NoteStatus.TRASHED,
            "folder_id": None,
            "updated_at": now,
        })
        if note.folder_id == folder_id else note
        for note in snapshot.notes
    )
    folders = tuple(
        f.model_copy(update={"parent_id": folder.parent_id, "updated_at": now})
        if f.parent_id == folder_id else f
        for f in snapshot.folders
        if f.id != folder_id
    )

    new = snapshot.model_copy(update={"folders": folders, "notes": notes})
    if affected:
        return Change(new, len(affected), "Folder deleted and notes moved to trash")
    return Change(new, 0, "Folder deleted")


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


def create_note(
    snapshot: Snapshot,
    title: str,
    content: str = "",
    folder_id: int | None = None,
    label_ids: Iterable[int] = (),
    is_pinned: bool = False,
    now: datetime | None = None,
) -> Change:
    """Create an active note."""
    now = now or utc_now()
    title = _clean_text(title, "title", TITLE_MAX_LENGTH)
    _check_folder_ref(snapshot, folder_id)
    labels = _resolve_labels(snapshot, label_ids)

    note = Note(
        id=next_id(snapshot.notes),
        title=title,
        content=content or "",
        folder_id=folder_id,
        status=NoteStatus.ACTIVE,
        is_pinned=is_pinned,
        created_at=now,
        updated_at=now,
        labels=labels,
    )
    new = snapshot.model_copy(update={"notes": snapshot.notes + (note,)})
    return Change(new, note, "Note created")


def update_note(
    snapshot: Snapshot,
    note_id: int,
    now: datetime | None = None,
    **changes: Any,
) -> Change:
    """
    Merge field changes into a note and refresh `updated_at`.

    Accepted fields: title, content, folder_id, is_pinned, status,
    is_archived, is_trashed, label_ids. `label_ids` replaces the whole
    label set. Status fields follow `resolve_status`.
    """
    unknown = set(changes) - NOTE_FIELDS
    if unknown:
        raise ValidationError("Unknown note fields", details={"fields": sorted(unknown)})

    note = _require_note(snapshot, note_id)
    update: dict[str, Any] = {"updated_at": now or utc_now()}

    if "title" in changes:
        update["title"] = _clean_text(changes["title"], "title", TITLE_MAX_LENGTH)
    if "content" in changes:
        update["content"] = changes["content"] or ""
    if "folder_id" in changes:
        _check_folder_ref(snapshot, changes["folder_id"])
        update["folder_id"] = changes["folder_id"]
    if "is_pinned" in changes:
        update["is_pinned"] = bool(changes["is_pinned"])
    if any(changes.get(field) is not None for field in STATUS_FIELDS):
        update["status"] = resolve_status(
            note.status,
            changes.get("status"),
            is_archived=changes.get("is_archived"),
            is_trashed=changes.get("is_trashed"),
        )
    if "label_ids" in changes:
        update["labels"] = _resolve_labels(snapshot, changes["label_ids"])

    updated = note.model_copy(update=update)
    return Change(_with_note(snapshot, updated), updated, "Note updated")


def move_note(
    snapshot: Snapshot,
    note_id: int,
    folder_id: int | None,
    now: datetime | None = None,
) -> Change:
    """File a note in a folder, or under All Notes when `folder_id` is None."""
    note = _require_note(snapshot, note_id)
    if folder_id is not None:
        _require_folder(snapshot, folder_id)

    message = f"Note moved to {_folder_name(snapshot, folder_id)}"
    if note.folder_id == folder_id:
        return Change(snapshot, note, message)

    updated = note.model_copy(update={"folder_id": folder_id, "updated_at": now or utc_now()})
    return Change(_with_note(snapshot, updated), updated, message)


def duplicate_note(snapshot: Snapshot, note_id: int, now: datetime | None = None) -> Change:
    """Copy a note's content, folder and labels into a fresh active, unpinned note."""
    now = now or utc_now()
    source = _require_note(snapshot, note_id)
    copy = source.model_copy(update={
        "id": next_id(snapshot.notes),
        "title": copy_title(source.title),
        "status": NoteStatus.ACTIVE,
        "is_pinned": False,
        "created_at": now,
        "updated_at": now,
    })
    new = snapshot.model_copy(update={"notes": snapshot.notes + (copy,)})
    return Change(new, copy, "Note duplicated")


def set_pinned(snapshot: Snapshot, note_id: int, pinned: bool) -> Change:
    """Pin or unpin a note. Status and `updated_at` are left alone."""
    note = _require_note(snapshot, note_id)
    message = "Note pinned" if pinned else "Note unpinned"
    if note.is_pinned == pinned:
        return Change(snapshot, note, message)
    updated = note.model_copy(update={"is_pinned": pinned})
    return Change(_with_note(snapshot, updated), updated, message)


def toggle_pin(snapshot: Snapshot, note_id: int) -> Change:
    note = _require_note(snapshot, note_id)
    return set_pinned(snapshot, note_id, not note.is_pinned)


def _set_status(
    snapshot: Snapshot,
    note: Note,
    status: NoteStatus,
    message: str,
    now: datetime | None,
) -> Change:
    if note.status is status:
        return Change(snapshot, note, message)
    updated = note.model_copy(update={"status": status, "updated_at": now or utc_now()})
    return Change(_with_note(snapshot, updated), updated, message)


def archive_note(snapshot: Snapshot, note_id: int, now: datetime | None = None) -> Change:
    note = _require_note(snapshot, note_id)
    if note.status is NoteStatus.TRASHED:
        raise ValidationError("Restore the note from trash before archiving it")
    return _set_status(snapshot, note, NoteStatus.ARCHIVED, "Note archived", now)


def unarchive_note(snapshot: Snapshot, note_id: int, now: datetime | None = None) -> Change:
    note = _require_note(snapshot, note_id)
    if note.status is not NoteStatus.ARCHIVED:
        return Change(snapshot, note, "Note is not archived")
    return _set_status(snapshot, note, NoteStatus.ACTIVE, "Note restored from archive", now)


def toggle_archive(snapshot: Snapshot, note_id: int, now: datetime | None = None) -> Change:
    """Archive an active note or bring an archived one back."""
    note = _require_note(snapshot, note_id)
    if note.status is NoteStatus.ARCHIVED:
        return unarchive_note(snapshot, note_id, now=now)
    return archive_note(snapshot, note_id, now=now)


def trash_note(snapshot: Snapshot, note_id: int, now: datetime | None = None) -> Change:
    note = _require_note(snapshot, note_id)
    return _set_status(snapshot, note, NoteStatus.TRASHED, "Note moved to trash", now)


def restore_note(snapshot: Snapshot, note_id: int, now: datetime | None = None) -> Change:
    note = _require_note(snapshot, note_id)
    if note.status is not NoteStatus.TRASHED:
        return Change(snapshot, note, "Note is not in trash")
    return _set_status(snapshot, note, NoteStatus.ACTIVE, "Note restored", now)


def purge_note(snapshot: Snapshot, note_id: int) -> Change:
    """Remove a note for good, along with its label associations."""
    note = _require_note(snapshot, note_id)
    new = snapshot.model_copy(update={"notes": _without(snapshot.notes, note_id)})
    return Change(new, note, "Note deleted permanently")


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def create_label(
    snapshot: Snapshot,
    name: str,
    color: str = DEFAULT_LABEL_COLOR,
    now: datetime | None = None,
) -> Change:
    name = _clean_text(name, "name", LABEL_NAME_MAX_LENGTH)
    color = _check_color(color)
    _unique_label_name(snapshot, name)

    label = Label(
        id=next_id(snapshot.labels),
        name=name,
        color=color,
        created_at=now or utc_now(),
    )
    new = snapshot.model_copy(update={"labels": snapshot.labels + (label,)})
    return Change(new, label, "Label created")


def update_label(snapshot: Snapshot, label_id: int, **changes: Any) -> Change:
    """
    Rename or recolor a label.

    Notes carrying the label see the new values; their timestamps stay put.
    """
    unknown = set(changes) - {"name", "color"}
    if unknown:
        raise ValidationError("Unknown label fields", details={"fields": sorted(unknown)})

    label = _require_label(snapshot, label_id)
    update: dict[str, Any] = {}
    if "name" in changes:
        update["name"] = _clean_text(changes["name"], "name", LABEL_NAME_MAX_LENGTH)
        _unique_label_name(snapshot, update["name"], label_id)
    if "color" in changes:
        update["color"] = _check_color(changes["color"])

    updated = label.model_copy(update=update)
    notes = tuple(
        note.model_copy(update={"labels": _replace(note.labels, updated)})
        if note.has_label(label_id) else note
        for note in snapshot.notes
    )
    new = snapshot.model_copy(update={
        "labels": _replace(snapshot.labels, updated),
        "notes": notes,
    })
    return Change(new, updated, "Label updated")


def delete_label(snapshot: Snapshot, label_id: int) -> Change:
    """Delete a label and detach it from every note. Note status is unchanged."""
    label = _require_label(snapshot, label_id)
    notes = tuple(
        note.model_copy(update={"labels": _without(note.labels, label_id)})
        if note.has_label(label_id) else note
        for note in snapshot.notes
    )
    new = snapshot.model_copy(update={
        "labels": _without(snapshot.labels, label_id),
        "notes": notes,
    })
    return Change(new, label, "Label deleted")


def add_label(snapshot: Snapshot, note_id: int, label_id: int) -> Change:
    """Attach a label to a note. Attaching twice is a no-op."""
    note = _require_note(snapshot, note_id)
    label = _require_label(snapshot, label_id)
    if note.has_label(label_id):
        return Change(snapshot, note, "Label added")
    updated = note.model_copy(update={"labels": note.labels + (label,)})
    return Change(_with_note(snapshot, updated), updated, "Label added")


def remove_label(snapshot: Snapshot, note_id: int, label_id: int) -> Change:
    """Detach a label from a note. Detaching a missing label is a no-op."""
    note = _require_note(snapshot, note_id)
    if not note.has_label(label_id):
        return Change(snapshot, note, "Label removed")
    updated = note.model_copy(update={"labels": _without(note.labels, label_id)})
    return Change(_with_note(snapshot, updated), updated, "Label removed")
