"""
Notes API Endpoints.

REST API endpoints for notes, their lifecycle actions and
their label associations.
"""

from fastapi import APIRouter, Query
from fastapi.responses import Response

from notekeeper.backend.core.dependencies import DbSession, RequestId
from notekeeper.backend.models.note import Note
from notekeeper.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeeper.backend.schemas.label import LabelResponse
from notekeeper.backend.schemas.note import (
    NoteCreate,
    NoteMove,
    NoteResponse,
    NoteSectionsResponse,
    NoteStatsResponse,
    NoteUpdate,
)
from notekeeper.backend.services.note import NoteService
from notekeeper.organizer.filters import NoteView

router = APIRouter()


def _note_response(note: Note, request_id: str) -> ApiResponse[NoteResponse]:
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="Get every note, including archived and trashed ones.",
)
async def list_notes(
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List all notes."""
    notes = await NoteService(db).list_notes()
    return ApiResponse(
        data=[NoteResponse.model_validate(n) for n in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/visible",
    response_model=ApiResponse[NoteSectionsResponse],
    summary="Visible notes",
    description=(
        "Notes shown for a view selection. Trashed notes never appear. "
        "With archived=true only archived notes are shown and the folder is ignored; "
        "otherwise pinned notes are returned separately."
    ),
)
async def visible_notes(
    db: DbSession,
    request_id: RequestId,
    folder_id: int | None = Query(default=None, description="Selected folder"),
    label_id: int | None = Query(default=None, description="Selected label"),
    search: str = Query(default="", max_length=200, description="Title or content substring"),
    archived: bool = Query(default=False, description="Show the archive"),
) -> ApiResponse[NoteSectionsResponse]:
    """Filter notes for display."""
    view = NoteView(
        folder_id=folder_id,
        label_id=label_id,
        search_term=search,
        show_archived=archived,
    )
    sections = await NoteService(db).visible_notes(view)
    return ApiResponse(
        data=NoteSectionsResponse(pinned=sections.pinned, others=sections.others),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note, optionally in a folder and with labels attached.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await NoteService(db).create_note(data)
    return _note_response(note, request_id)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: int,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = await NoteService(db).get_note(note_id)
    return _note_response(note, request_id)


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description=(
        "Update an existing note. Only provided fields are updated. "
        "A labels list replaces the note's labels."
    ),
)
@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Patch a note",
    description="Same as PUT.",
)
async def update_note(
    note_id: int,
    data: NoteUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await NoteService(db).update_note(note_id, data)
    return _note_response(note, request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Permanently delete a note. Use /trash to move it to the trash instead.",
)
async def delete_note(
    note_id: int,
    db: DbSession,
    request_id: RequestId,
) -> None:
    """Delete a note."""
    await NoteService(db).delete_note(note_id)


@router.post(
    "/{note_id}/move",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note",
    description="File a note in a folder, or under All Notes with folder_id null.",
)
async def move_note(
    note_id: int,
    data: NoteMove,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Move a note."""
    note = await NoteService(db).move_note(note_id, data.folder_id)
    return _note_response(note, request_id)


@router.post(
    "/{note_id}/duplicate",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Duplicate a note",
)
async def duplicate_note(
    note_id: int,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Duplicate a note."""
    note = await NoteService(db).duplicate_note(note_id)
    return _note_response(note, request_id)


@router.post("/{note_id}/pin", response_model=ApiResponse[NoteResponse], summary="Pin a note")
async def pin_note(note_id: int, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).set_pinned(note_id, True)
    return _note_response(note, request_id)


@router.post("/{note_id}/unpin", response_model=ApiResponse[NoteResponse], summary="Unpin a note")
async def unpin_note(note_id: int, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).set_pinned(note_id, False)
    return _note_response(note, request_id)


@router.post("/{note_id}/archive", response_model=ApiResponse[NoteResponse], summary="Archive a note")
async def archive_note(note_id: int, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).archive_note(note_id)
    return _note_response(note, request_id)


@router.post(
    "/{note_id}/unarchive",
    response_model=ApiResponse[NoteResponse],
    summary="Unarchive a note",
)
async def unarchive_note(note_id: int, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).unarchive_note(note_id)
    return _note_response(note, request_id)


@router.post("/{note_id}/trash", response_model=ApiResponse[NoteResponse], summary="Move a note to the trash")
async def trash_note(note_id: int, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).trash_note(note_id)
    return _note_response(note, request_id)


@router.post(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note from the trash",
)
async def restore_note(note_id: int, db: DbSession, request_id: RequestId) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).restore_note(note_id)
    return _note_response(note, request_id)


@router.get(
    "/{note_id}/stats",
    response_model=ApiResponse[NoteStatsResponse],
    summary="Text statistics",
    description="Line, character and word counts of the note's content.",
)
async def note_stats(
    note_id: int,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteStatsResponse]:
    stats = await NoteService(db).note_stats(note_id)
    return ApiResponse(
        data=NoteStatsResponse(**stats.model_dump()),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}/export",
    summary="Export a note",
    description="Download the note's content as txt, md, html, csv or json. Unknown formats give txt.",
    response_class=Response,
)
async def export_note(
    note_id: int,
    db: DbSession,
    format: str = Query(default="txt", max_length=10, description="Export format"),
) -> Response:
    exported = await NoteService(db).export_note(note_id, format)
    return Response(
        content=exported.body,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get(
    "/{note_id}/labels",
    response_model=ApiResponse[list[LabelResponse]],
    summary="Labels of a note",
)
async def list_note_labels(
    note_id: int,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[LabelResponse]]:
    labels = await NoteService(db).list_note_labels(note_id)
    return ApiResponse(
        data=[LabelResponse.model_validate(label) for label in labels],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{note_id}/labels/{label_id}",
    status_code=204,
    summary="Attach a label",
    description="Attach a label to a note. Attaching an already attached label does nothing.",
)
async def add_note_label(
    note_id: int,
    label_id: int,
    db: DbSession,
    request_id: RequestId,
) -> None:
    await NoteService(db).add_label(note_id, label_id)


@router.delete(
    "/{note_id}/labels/{label_id}",
    status_code=204,
    summary="Detach a label",
    description="Detach a label from a note. Returns 404 when it was not attached.",
)
async def remove_note_label(
    note_id: int,
    label_id: int,
    db: DbSession,
    request_id: RequestId,
) -> None:
    await NoteService(db).remove_label(note_id, label_id)
