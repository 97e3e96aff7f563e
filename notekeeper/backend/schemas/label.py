"""
Label Schemas.

Pydantic schemas for label API request/response validation.
"""

from pydantic import BaseModel, Field

from notekeeper.organizer.entities import DEFAULT_LABEL_COLOR, Label

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class LabelCreate(BaseModel):
    """Schema for creating a label."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Unique label name",
        examples=["urgent"],
    )
    color: str = Field(
        default=DEFAULT_LABEL_COLOR,
        pattern=COLOR_PATTERN,
        description="Hex color",
        examples=["#ff0000"],
    )


class LabelUpdate(BaseModel):
    """Schema for updating a label."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)


class LabelResponse(Label):
    """Schema for label in API responses."""
