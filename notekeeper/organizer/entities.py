"""
Organizer Entities.

Immutable value objects for folders, labels and notes shared by the
client-only workspace, the REST client and the API response schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

DEFAULT_LABEL_COLOR = "#808080"


class NoteStatus(str, Enum):
    """Lifecycle of a note. Pinning is tracked separately."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    TRASHED = "trashed"


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class Folder(_Entity):
    """A named, optionally nested container for notes."""

    id: int
    name: str
    parent_id: int | None = None
    created_at: datetime
    updated_at: datetime


class FolderNode(Folder):
    """A folder placed in the tree, carrying its direct children."""

    children: list["FolderNode"] = Field(default_factory=list)


class Label(_Entity):
    """A colored tag attachable to any number of notes."""

    id: int
    name: str
    color: str = DEFAULT_LABEL_COLOR
    created_at: datetime


class Note(_Entity):
    """
    A note with its lifecycle status, pin flag and attached labels.

    `is_archived` and `is_trashed` are derived from `status` and exist for
    clients that still think in booleans. Payloads that carry those booleans
    without a `status` are converted on the way in; trashed wins over archived.
    """

    id: int
    title: str
    content: str = ""
    folder_id: int | None = None
    status: NoteStatus = NoteStatus.ACTIVE
    is_pinned: bool = False
    created_at: datetime
    updated_at: datetime
    labels: tuple[Label, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _convert_legacy_flags(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        archived = data.pop("is_archived", False)
        trashed = data.pop("is_trashed", False)
        if data.get("status") is None:
            if trashed:
                data["status"] = NoteStatus.TRASHED
            elif archived:
                data["status"] = NoteStatus.ARCHIVED
            else:
                data["status"] = NoteStatus.ACTIVE
        return data

    @computed_field
    @property
    def is_archived(self) -> bool:
        return self.status is NoteStatus.ARCHIVED

    @computed_field
    @property
    def is_trashed(self) -> bool:
        return self.status is NoteStatus.TRASHED

    def has_label(self, label_id: int) -> bool:
        return any(label.id == label_id for label in self.labels)

    @property
    def label_ids(self) -> list[int]:
        return [label.id for label in self.labels]


class Snapshot(_Entity):
    """
    The full collection state of a workspace.

    Mutations never change a snapshot; they build a new one.
    """

    folders: tuple[Folder, ...] = ()
    notes: tuple[Note, ...] = ()
    labels: tuple[Label, ...] = ()

    def folder(self, folder_id: int) -> Folder | None:
        return next((f for f in self.folders if f.id == folder_id), None)

    def note(self, note_id: int) -> Note | None:
        return next((n for n in self.notes if n.id == note_id), None)

    def label(self, label_id: int) -> Label | None:
        return next((lb for lb in self.labels if lb.id == label_id), None)

    def notes_in_folder(self, folder_id: int) -> list[Note]:
        return [n for n in self.notes if n.folder_id == folder_id]
