"""
Note Schemas.

Pydantic schemas for note API request/response validation.

Requests may still send `is_archived` / `is_trashed` instead of `status`.
On create they are folded into `status` (trashed wins); on update they
are kept and resolved against the note's stored status by the service.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from notekeeper.organizer.entities import Note, NoteStatus
from notekeeper.organizer.textstats import TextStats


def _fold_status_flags(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    if "is_archived" not in data and "is_trashed" not in data:
        return data
    data = dict(data)
    archived = data.pop("is_archived", None)
    trashed = data.pop("is_trashed", None)
    if data.get("status") is None:
        if trashed:
            data["status"] = NoteStatus.TRASHED
        elif archived:
            data["status"] = NoteStatus.ARCHIVED
        else:
            data["status"] = NoteStatus.ACTIVE
    return data


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["Meeting Notes"],
    )
    content: str = Field(
        default="",
        description="Note content",
        examples=["Discuss project timeline"],
    )
    folder_id: int | None = Field(default=None, description="Containing folder")
    status: NoteStatus = Field(default=NoteStatus.ACTIVE, description="Lifecycle status")
    is_pinned: bool = Field(default=False, description="Show in the Pinned section")
    labels: list[int] | None = Field(default=None, description="Label ids to attach")

    @model_validator(mode="before")
    @classmethod
    def _legacy_flags(cls, data: Any) -> Any:
        return _fold_status_flags(data)


class NoteUpdate(BaseModel):
    """
    Schema for updating an existing note.

    Only fields present in the request are applied. A `labels` list
    replaces the note's labels; leaving it out keeps them.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None)
    folder_id: int | None = Field(default=None)
    status: NoteStatus | None = Field(default=None)
    is_archived: bool | None = Field(default=None, description="Archive or unarchive")
    is_trashed: bool | None = Field(default=None, description="Trash or restore")
    is_pinned: bool | None = Field(default=None)
    labels: list[int] | None = Field(default=None)


class NoteMove(BaseModel):
    """Target folder for a note; null files it under All Notes."""

    folder_id: int | None = Field(default=None)


class NoteResponse(Note):
    """Schema for note in API responses."""


class NoteSectionsResponse(BaseModel):
    """Visible notes, split into the Pinned section and the rest."""

    pinned: list[Note]
    others: list[Note]


class NoteStatsResponse(TextStats):
    """Line, character and word counts of a note's content."""
