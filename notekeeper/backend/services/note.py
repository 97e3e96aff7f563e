"""
Note Service.

Business logic layer for notes. Orchestrates repositories,
handles validation, and implements the note lifecycle rules:
status changes, moves, duplication and label associations.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import NotFoundError, ValidationError
from notekeeper.backend.core.utils import utc_now
from notekeeper.backend.models.label import Label
from notekeeper.backend.models.note import Note
from notekeeper.backend.repositories.folder import FolderRepository
from notekeeper.backend.repositories.label import LabelRepository
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.schemas.note import NoteCreate, NoteUpdate
from notekeeper.backend.services.base import BaseService
from notekeeper.organizer import entities
from notekeeper.organizer.entities import NoteStatus
from notekeeper.organizer.export import ExportedFile, render_export
from notekeeper.organizer.filters import NoteSections, NoteView, split_pinned, visible_notes
from notekeeper.organizer.mutations import copy_title, resolve_status
from notekeeper.organizer.textstats import TextStats, text_stats


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, and retrieval with
    proper validation and error handling.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.folders = FolderRepository(session)
        self.labels = LabelRepository(session)

    async def _check_folder(self, folder_id: int | None) -> None:
        if folder_id is not None and not await self.folders.exists(folder_id):
            raise ValidationError("Folder does not exist", details={"folder_id": folder_id})

    async def _check_labels(self, label_ids: list[int]) -> set[int]:
        wanted = set(label_ids)
        found = {label.id for label in await self.labels.get_many(wanted)}
        missing = sorted(wanted - found)
        if missing:
            raise ValidationError("Unknown labels", details={"labels": missing})
        return wanted

    async def get_note(self, note_id: int) -> Note:
        """
        Get a note by ID, labels included.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def list_notes(self) -> list[Note]:
        """All notes in id order, whatever their status."""
        return await self.repo.get_all()

    async def visible_notes(self, view: NoteView) -> NoteSections:
        """Notes shown for `view`, with the Pinned section split off."""
        notes = [entities.Note.model_validate(n) for n in await self.repo.get_all()]
        return split_pinned(visible_notes(notes, view), view)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Raises:
            ValidationError: If the title is blank, or the folder or a label does not exist
        """
        self._validate_required(data.model_dump(), ["title"])
        await self._check_folder(data.folder_id)
        label_ids = await self._check_labels(data.labels or [])

        self._log_operation("Creating note", title=data.title, folder_id=data.folder_id)
        now = utc_now()
        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title.strip(),
                content=data.content,
                folder_id=data.folder_id,
                status=data.status,
                is_pinned=data.is_pinned,
                created_at=now,
                updated_at=now,
            ),
        )
        if label_ids:
            await self._execute_db_operation(
                "set_note_labels",
                self.repo.set_labels(note.id, label_ids),
            )

        self._log_debug("Note created", note_id=note.id)
        return await self.repo.get_by_id(note.id)

    async def update_note(self, note_id: int, data: NoteUpdate) -> Note:
        """
        Update an existing note.

        Only fields present in `data` are applied; `updated_at` is refreshed.
        A `labels` list replaces the current associations.

        Raises:
            NotFoundError: If note not found
            ValidationError: If a referenced folder or label does not exist,
                or the update archives a note that is in the trash
        """
        update_data = data.model_dump(exclude_unset=True)
        note = await self.repo.get_by_id(note_id)

        label_ids = update_data.pop("labels", None)
        wanted = await self._check_labels(label_ids) if label_ids is not None else None
        for field in ("title", "status", "is_pinned", "content"):
            if field in update_data and update_data[field] is None:
                raise ValidationError(f"{field} cannot be null", details={field: "Must not be null"})

        is_archived = update_data.pop("is_archived", None)
        is_trashed = update_data.pop("is_trashed", None)
        if "status" in update_data or is_archived is not None or is_trashed is not None:
            update_data["status"] = resolve_status(
                note.status,
                update_data.get("status"),
                is_archived=is_archived,
                is_trashed=is_trashed,
            )
        if "title" in update_data:
            self._validate_required(update_data, ["title"])
            update_data["title"] = update_data["title"].strip()
        if "folder_id" in update_data:
            await self._check_folder(update_data["folder_id"])

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(update_data.keys()) + (["labels"] if label_ids is not None else []),
        )

        update_data["updated_at"] = utc_now()
        await self._execute_db_operation(
            "update_note",
            self.repo.update(note_id, **update_data),
        )
        if wanted is not None:
            await self._execute_db_operation(
                "set_note_labels",
                self.repo.set_labels(note_id, wanted),
            )

        return await self.repo.get_by_id(note_id)

    async def delete_note(self, note_id: int) -> None:
        """
        Permanently delete a note and its label associations.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation(
            "delete_note",
            self.repo.delete(note_id),
        )

    async def move_note(self, note_id: int, folder_id: int | None) -> Note:
        """
        File a note in a folder, or under All Notes when `folder_id` is None.

        Moving a note to the folder it is already in changes nothing.

        Raises:
            NotFoundError: If the note or the target folder does not exist
        """
        note = await self.repo.get_by_id(note_id)
        if folder_id is not None and not await self.folders.exists(folder_id):
            raise NotFoundError("Folder not found")
        if note.folder_id == folder_id:
            return note

        self._log_operation("Moving note", note_id=note_id, folder_id=folder_id)
        await self._execute_db_operation(
            "move_note",
            self.repo.update(note_id, folder_id=folder_id, updated_at=utc_now()),
        )
        return await self.repo.get_by_id(note_id)

    async def duplicate_note(self, note_id: int) -> Note:
        """
        Copy a note's content, folder and labels into a new active, unpinned note.

        Raises:
            NotFoundError: If note not found
        """
        source = await self.repo.get_by_id(note_id)
        self._log_operation("Duplicating note", note_id=note_id)

        now = utc_now()
        copy = await self._execute_db_operation(
            "duplicate_note",
            self.repo.create(
                title=copy_title(source.title),
                content=source.content,
                folder_id=source.folder_id,
                status=NoteStatus.ACTIVE,
                is_pinned=False,
                created_at=now,
                updated_at=now,
            ),
        )
        label_ids = {label.id for label in source.labels}
        if label_ids:
            await self._execute_db_operation(
                "set_note_labels",
                self.repo.set_labels(copy.id, label_ids),
            )
        return await self.repo.get_by_id(copy.id)

    async def set_pinned(self, note_id: int, pinned: bool) -> Note:
        """Pin or unpin a note. Status and `updated_at` are left alone."""
        await self.repo.get_by_id(note_id)
        self._log_operation("Pinning note" if pinned else "Unpinning note", note_id=note_id)
        await self._execute_db_operation(
            "set_pinned",
            self.repo.update(note_id, is_pinned=pinned),
        )
        return await self.repo.get_by_id(note_id)

    async def _set_status(self, note: Note, status: NoteStatus, operation: str) -> Note:
        if note.status is status:
            return note
        self._log_operation(operation, note_id=note.id, status=status.value)
        await self._execute_db_operation(
            operation,
            self.repo.update(note.id, status=status, updated_at=utc_now()),
        )
        return await self.repo.get_by_id(note.id)

    async def archive_note(self, note_id: int) -> Note:
        """
        Archive a note.

        Raises:
            NotFoundError: If note not found
            ValidationError: If the note is in the trash
        """
        note = await self.repo.get_by_id(note_id)
        if note.status is NoteStatus.TRASHED:
            raise ValidationError("Restore the note from trash before archiving it")
        return await self._set_status(note, NoteStatus.ARCHIVED, "Archiving note")

    async def unarchive_note(self, note_id: int) -> Note:
        """Bring an archived note back; other notes are returned unchanged."""
        note = await self.repo.get_by_id(note_id)
        if note.status is not NoteStatus.ARCHIVED:
            return note
        return await self._set_status(note, NoteStatus.ACTIVE, "Unarchiving note")

    async def trash_note(self, note_id: int) -> Note:
        note = await self.repo.get_by_id(note_id)
        return await self._set_status(note, NoteStatus.TRASHED, "Trashing note")

    async def restore_note(self, note_id: int) -> Note:
        """Take a note out of the trash; other notes are returned unchanged."""
        note = await self.repo.get_by_id(note_id)
        if note.status is not NoteStatus.TRASHED:
            return note
        return await self._set_status(note, NoteStatus.ACTIVE, "Restoring note")

    async def note_stats(self, note_id: int) -> TextStats:
        note = await self.repo.get_by_id(note_id)
        return text_stats(note.content)

    async def export_note(self, note_id: int, fmt: str | None) -> ExportedFile:
        note = await self.repo.get_by_id(note_id)
        self._log_debug("Exporting note", note_id=note_id, format=fmt)
        return render_export(note.content, fmt)

    async def list_note_labels(self, note_id: int) -> list[Label]:
        note = await self.repo.get_by_id(note_id)
        return list(note.labels)

    async def add_label(self, note_id: int, label_id: int) -> None:
        """
        Attach a label to a note. Attaching twice is a no-op.

        Raises:
            NotFoundError: If the note or the label does not exist
        """
        await self.repo.get_by_id(note_id)
        await self.labels.get_by_id(label_id)
        added = await self._execute_db_operation(
            "add_label",
            self.repo.add_label(note_id, label_id),
        )
        self._log_debug("Label attached", note_id=note_id, label_id=label_id, added=added)

    async def remove_label(self, note_id: int, label_id: int) -> None:
        """
        Detach a label from a note.

        Raises:
            NotFoundError: If the association does not exist
        """
        removed = await self._execute_db_operation(
            "remove_label",
            self.repo.remove_label(note_id, label_id),
        )
        if not removed:
            raise NotFoundError("Relationship not found")
        self._log_debug("Label detached", note_id=note_id, label_id=label_id)
