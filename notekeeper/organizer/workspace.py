"""
Workspace.

Managed in-memory store for client-only mode. Every operation applies a
mutation to the current snapshot, flushes the result to local storage and
reports an Outcome carrying the user-visible message.

Errors never escape an operation: rule violations come back as an
unchanged Outcome with the alert text, and a failed flush keeps the
in-memory change but reports that it was not saved.

Usage:
    from notekeeper.organizer.storage import LocalStorage
    from notekeeper.organizer.workspace import Workspace

    workspace = Workspace.open(LocalStorage("data/workspace"))
    outcome = workspace.create_folder("Work")
    print(outcome.message)  # "Folder created"
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from notekeeper.backend.core.exceptions import ApplicationError, StorageError
from notekeeper.backend.core.logging import get_logger, log_with_source
from notekeeper.organizer import mutations
from notekeeper.organizer.dragdrop import MoveNote, ReparentFolder, resolve_drop
from notekeeper.organizer.entities import FolderNode, Note, Snapshot
from notekeeper.organizer.filters import NoteSections, NoteView, split_pinned, visible_notes
from notekeeper.organizer.hierarchy import build_hierarchy
from notekeeper.organizer.mutations import ConfirmCallback
from notekeeper.organizer.storage import LocalStorage

logger = get_logger(__name__)

SAVE_FAILED_MESSAGE = "Changes could not be saved"
DROP_IGNORED_MESSAGE = "Nothing to move"


@dataclass(frozen=True)
class Outcome:
    """Result of a workspace operation."""

    message: str
    value: Any = None
    changed: bool = False
    saved: bool = True
    rejected: bool = False

    @property
    def ok(self) -> bool:
        return self.saved and not self.rejected


class Workspace:
    """
    In-memory folders, notes and labels with write-through persistence.

    Args:
        storage: Store flushed after each change; None keeps everything in memory
        snapshot: Initial state
    """

    def __init__(
        self,
        storage: LocalStorage | None = None,
        snapshot: Snapshot | None = None,
    ) -> None:
        self._storage = storage
        self._snapshot = snapshot or Snapshot()

    @classmethod
    def open(cls, storage: LocalStorage) -> "Workspace":
        """
        Load a workspace from storage.

        Raises:
            StorageError: If the stored data cannot be read
        """
        return cls(storage=storage, snapshot=storage.load_snapshot())

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def _apply(self, operation: str, func: Callable[..., mutations.Change], *args: Any, **kwargs: Any) -> Outcome:
        try:
            change = func(self._snapshot, *args, **kwargs)
        except ApplicationError as e:
            log_with_source(
                logger, "workspace", "warning", "Operation rejected",
                operation=operation, code=e.code, reason=e.message,
            )
            return Outcome(message=e.message, rejected=True)

        if change.snapshot is self._snapshot:
            return Outcome(message=change.message, value=change.value)

        self._snapshot = change.snapshot
        log_with_source(logger, "workspace", "debug", "Operation applied", operation=operation)
        if not self._flush():
            return Outcome(message=SAVE_FAILED_MESSAGE, value=change.value, changed=True, saved=False)
        return Outcome(message=change.message, value=change.value, changed=True)

    def _flush(self) -> bool:
        if self._storage is None:
            return True
        try:
            self._storage.save_snapshot(self._snapshot)
        except StorageError as e:
            log_with_source(logger, "workspace", "error", "Flush failed", error=e.message)
            return False
        return True

    # Reads

    def hierarchy(self) -> list[FolderNode]:
        return build_hierarchy(self._snapshot.folders)

    def visible(self, view: NoteView | None = None) -> NoteSections:
        view = view or NoteView()
        return split_pinned(visible_notes(self._snapshot.notes, view), view)

    def get_note(self, note_id: int) -> Note | None:
        return self._snapshot.note(note_id)

    # Folders

    def create_folder(self, name: str, parent_id: int | None = None) -> Outcome:
        return self._apply("create_folder", mutations.create_folder, name, parent_id)

    def update_folder(self, folder_id: int, **changes: Any) -> Outcome:
        return self._apply("update_folder", mutations.update_folder, folder_id, **changes)

    def rename_folder(self, folder_id: int, name: str) -> Outcome:
        return self._apply("rename_folder", mutations.rename_folder, folder_id, name)

    def move_folder(self, folder_id: int, parent_id: int | None) -> Outcome:
        return self._apply("move_folder", mutations.move_folder, folder_id, parent_id)

    def delete_folder(self, folder_id: int, confirm: ConfirmCallback | None = None) -> Outcome:
        return self._apply("delete_folder", mutations.delete_folder, folder_id, confirm)

    # Notes

    def create_note(
        self,
        title: str,
        content: str = "",
        folder_id: int | None = None,
        label_ids: list[int] | None = None,
        is_pinned: bool = False,
    ) -> Outcome:
        return self._apply(
            "create_note", mutations.create_note,
            title, content, folder_id, label_ids or (), is_pinned,
        )

    def update_note(self, note_id: int, **changes: Any) -> Outcome:
        return self._apply("update_note", mutations.update_note, note_id, **changes)

    def move_note(self, note_id: int, folder_id: int | None) -> Outcome:
        return self._apply("move_note", mutations.move_note, note_id, folder_id)

    def duplicate_note(self, note_id: int) -> Outcome:
        return self._apply("duplicate_note", mutations.duplicate_note, note_id)

    def set_pinned(self, note_id: int, pinned: bool) -> Outcome:
        return self._apply("set_pinned", mutations.set_pinned, note_id, pinned)

    def toggle_pin(self, note_id: int) -> Outcome:
        return self._apply("toggle_pin", mutations.toggle_pin, note_id)

    def archive_note(self, note_id: int) -> Outcome:
        return self._apply("archive_note", mutations.archive_note, note_id)

    def unarchive_note(self, note_id: int) -> Outcome:
        return self._apply("unarchive_note", mutations.unarchive_note, note_id)

    def toggle_archive(self, note_id: int) -> Outcome:
        return self._apply("toggle_archive", mutations.toggle_archive, note_id)

    def trash_note(self, note_id: int) -> Outcome:
        return self._apply("trash_note", mutations.trash_note, note_id)

    def restore_note(self, note_id: int) -> Outcome:
        return self._apply("restore_note", mutations.restore_note, note_id)

    def purge_note(self, note_id: int) -> Outcome:
        return self._apply("purge_note", mutations.purge_note, note_id)

    # Labels

    def create_label(self, name: str, color: str | None = None) -> Outcome:
        if color is None:
            return self._apply("create_label", mutations.create_label, name)
        return self._apply("create_label", mutations.create_label, name, color)

    def update_label(self, label_id: int, **changes: Any) -> Outcome:
        return self._apply("update_label", mutations.update_label, label_id, **changes)

    def delete_label(self, label_id: int) -> Outcome:
        return self._apply("delete_label", mutations.delete_label, label_id)

    def add_label(self, note_id: int, label_id: int) -> Outcome:
        return self._apply("add_label", mutations.add_label, note_id, label_id)

    def remove_label(self, note_id: int, label_id: int) -> Outcome:
        return self._apply("remove_label", mutations.remove_label, note_id, label_id)

    # Drag and drop

    def drop(self, source_id: str, target_id: str) -> Outcome:
        """Apply the reassignment encoded by a drag source and drop target."""
        action = resolve_drop(source_id, target_id)
        if isinstance(action, MoveNote):
            return self.move_note(action.note_id, action.folder_id)
        if isinstance(action, ReparentFolder):
            return self.move_folder(action.folder_id, action.parent_id)
        log_with_source(
            logger, "workspace", "debug", "Drop ignored",
            source_id=source_id, target_id=target_id,
        )
        return Outcome(message=DROP_IGNORED_MESSAGE)
