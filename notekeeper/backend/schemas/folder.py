"""
Folder Schemas.

Pydantic schemas for folder API request/response validation.
"""

from pydantic import BaseModel, Field

from notekeeper.organizer.entities import Folder


class FolderCreate(BaseModel):
    """Schema for creating a folder."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Folder name",
        examples=["Work"],
    )
    parent_id: int | None = Field(
        default=None,
        description="Parent folder, or null for a root folder",
    )


class FolderUpdate(BaseModel):
    """Schema for renaming or reparenting a folder. Omitted fields are kept."""

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Folder name",
    )
    parent_id: int | None = Field(
        default=None,
        description="Parent folder, or null to move to the top level",
    )


class FolderResponse(Folder):
    """Schema for folder in API responses."""