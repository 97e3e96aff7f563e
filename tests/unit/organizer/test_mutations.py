"""
Unit Tests for Mutation Operations.
"""

import pytest

from notekeeper.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from notekeeper.organizer import mutations
from notekeeper.organizer.entities import NoteStatus, Snapshot


class TestIds:
    """Tests for id assignment."""

    def test_next_id_empty(self):
        """Should start at 1."""
        assert mutations.next_id([]) == 1

    def test_next_id_after_gap(self, sample_snapshot):
        """Should take one more than the largest id."""
        snapshot = mutations.purge_note(sample_snapshot, 3).snapshot

        assert mutations.next_id(snapshot.notes) == 6


class TestFolderMutations:
    """Tests for folder operations."""

    def test_create_folder(self, fixed_time):
        """Should add a root folder with the next id."""
        change = mutations.create_folder(Snapshot(), "  Work  ", now=fixed_time)

        assert change.message == "Folder created"
        assert change.value.id == 1
        assert change.value.name == "Work"
        assert change.value.created_at == fixed_time
        assert change.snapshot.folders == (change.value,)

    def test_create_folder_blank_name(self):
        """Should reject a blank name."""
        with pytest.raises(ValidationError, match="Name is required"):
            mutations.create_folder(Snapshot(), "   ")

    def test_create_folder_missing_parent(self, sample_snapshot):
        """Should reject a parent that does not exist."""
        with pytest.raises(ValidationError, match="Parent folder does not exist"):
            mutations.create_folder(sample_snapshot, "x", parent_id=42)

    def test_rename_folder(self, sample_snapshot, fixed_time):
        """Should rename and refresh updated_at."""
        change = mutations.rename_folder(sample_snapshot, 3, "Home")

        assert change.message == "Folder renamed"
        assert change.snapshot.folder(3).name == "Home"
        assert change.snapshot.folder(3).updated_at > fixed_time

    def test_move_folder_cycle(self, sample_snapshot):
        """Should refuse to move a folder under its own subfolder."""
        with pytest.raises(ValidationError, match="subfolders"):
            mutations.move_folder(sample_snapshot, 1, 2)

    def test_move_folder_to_root(self, sample_snapshot):
        """Should make the folder top-level."""
        change = mutations.move_folder(sample_snapshot, 2, None)

        assert change.message == "Folder moved"
        assert change.snapshot.folder(2).parent_id is None

    def test_move_folder_unchanged(self, sample_snapshot):
        """Should return the same snapshot when the parent does not change."""
        change = mutations.move_folder(sample_snapshot, 2, 1)

        assert change.snapshot is sample_snapshot

    def test_update_folder_unknown_field(self, sample_snapshot):
        """Should reject fields a folder does not have."""
        with pytest.raises(ValidationError):
            mutations.update_folder(sample_snapshot, 1, color="#ffffff")

    def test_delete_folder_without_notes(self, make_folder):
        """Should delete directly without asking."""
        snapshot = Snapshot(folders=(make_folder(1, "Empty"),))
        asked = []

        change = mutations.delete_folder(snapshot, 1, confirm=lambda n: asked.append(n) or True)

        assert asked == []
        assert change.message == "Folder deleted"
        assert change.snapshot.folders == ()

    def test_delete_folder_trashes_notes(self, sample_snapshot, fixed_time):
        """Should trash the folder's notes and clear their folder."""
        change = mutations.delete_folder(sample_snapshot, 1, confirm=lambda n: True)

        assert change.message == "Folder deleted and notes moved to trash"
        assert change.value == 2
        for note_id in (1, 4):
            note = change.snapshot.note(note_id)
            assert note.status is NoteStatus.TRASHED
            assert note.folder_id is None
            assert note.updated_at > fixed_time
        assert change.snapshot.note(2).folder_id == 2
        assert change.snapshot.note(2).status is NoteStatus.ACTIVE

    def test_delete_folder_reparents_children(self, sample_snapshot):
        """Should move subfolders up to the deleted folder's parent."""
        change = mutations.delete_folder(sample_snapshot, 1, confirm=lambda n: True)

        assert change.snapshot.folder(1) is None
        assert change.snapshot.folder(2).parent_id is None

    def test_delete_folder_refused(self, sample_snapshot):
        """Should leave everything untouched when the user declines."""
        counts = []

        def decline(count: int) -> bool:
            counts.append(count)
            return False

        change = mutations.delete_folder(sample_snapshot, 1, confirm=decline)

        assert counts == [2]
        assert change.message == "Folder deletion cancelled"
        assert change.snapshot is sample_snapshot

    def test_delete_missing_folder(self, sample_snapshot):
        """Should raise NotFoundError."""
        with pytest.raises(NotFoundError, match="Folder not found"):
            mutations.delete_folder(sample_snapshot, 99)


class TestNoteMutations:
    """Tests for note operations."""

    def test_create_note(self, sample_snapshot):
        """Should add an active note with its labels."""
        change = mutations.create_note(sample_snapshot, "New", "body", folder_id=3, label_ids=[2, 1, 2])

        note = change.value
        assert change.message == "Note created"
        assert note.id == 6
        assert note.status is NoteStatus.ACTIVE
        assert note.label_ids == [2, 1]
        assert change.snapshot.note(6) == note

    def test_create_note_unknown_label(self, sample_snapshot):
        """Should reject labels that do not exist."""
        with pytest.raises(ValidationError, match="Unknown labels"):
            mutations.create_note(sample_snapshot, "New", label_ids=[9])

    def test_create_note_missing_folder(self, sample_snapshot):
        """Should reject a folder that does not exist."""
        with pytest.raises(ValidationError, match="Folder does not exist"):
            mutations.create_note(sample_snapshot, "New", folder_id=9)

    def test_update_note_merges(self, sample_snapshot, fixed_time):
        """Should change only the given fields and refresh updated_at."""
        change = mutations.update_note(sample_snapshot, 2, content="new body", label_ids=[1])

        note = change.snapshot.note(2)
        assert change.message == "Note updated"
        assert note.title == "Standup"
        assert note.content == "new body"
        assert note.label_ids == [1]
        assert note.updated_at > fixed_time

    def test_update_note_bad_status(self, sample_snapshot):
        """Should reject an unknown status."""
        with pytest.raises(ValidationError, match="Invalid note status"):
            mutations.update_note(sample_snapshot, 2, status="deleted")

    def test_update_note_cannot_archive_trashed(self, sample_snapshot):
        """Should apply the archive rule to status updates."""
        with pytest.raises(ValidationError, match="Restore the note from trash"):
            mutations.update_note(sample_snapshot, 5, status="archived")
        with pytest.raises(ValidationError, match="Restore the note from trash"):
            mutations.update_note(sample_snapshot, 5, is_archived=True)

    def test_update_note_unarchive_flag_keeps_trash(self, sample_snapshot):
        """Should leave a trashed note in the trash on is_archived=False."""
        change = mutations.update_note(sample_snapshot, 5, is_archived=False)

        assert change.value.status is NoteStatus.TRASHED

    def test_update_note_status_flags(self, sample_snapshot):
        """Should read the flags relative to the current status."""
        assert mutations.update_note(sample_snapshot, 4, is_archived=False).value.status is NoteStatus.ACTIVE
        assert mutations.update_note(sample_snapshot, 4, is_trashed=False).value.status is NoteStatus.ARCHIVED
        assert mutations.update_note(sample_snapshot, 5, is_trashed=False).value.status is NoteStatus.ACTIVE
        assert mutations.update_note(sample_snapshot, 2, is_trashed=True).value.status is NoteStatus.TRASHED


class TestResolveStatus:
    """Tests for resolve_status."""

    @pytest.mark.parametrize(
        "current,changes,expected",
        [
            (NoteStatus.ACTIVE, {"is_archived": True}, NoteStatus.ARCHIVED),
            (NoteStatus.ACTIVE, {"is_archived": False}, NoteStatus.ACTIVE),
            (NoteStatus.ARCHIVED, {"is_archived": False}, NoteStatus.ACTIVE),
            (NoteStatus.TRASHED, {"is_archived": False}, NoteStatus.TRASHED),
            (NoteStatus.ARCHIVED, {"is_trashed": True}, NoteStatus.TRASHED),
            (NoteStatus.ARCHIVED, {"is_trashed": False}, NoteStatus.ARCHIVED),
            (NoteStatus.TRASHED, {"is_trashed": False}, NoteStatus.ACTIVE),
            (NoteStatus.TRASHED, {"is_trashed": False, "is_archived": True}, NoteStatus.ARCHIVED),
            (NoteStatus.ARCHIVED, {"status": "trashed", "is_archived": False}, NoteStatus.TRASHED),
            (NoteStatus.TRASHED, {"status": "active"}, NoteStatus.ACTIVE),
        ],
    )
    def test_resolve(self, current, changes, expected):
        assert mutations.resolve_status(current, **changes) is expected

    def test_archive_of_trashed_rejected(self):
        with pytest.raises(ValidationError, match="Restore the note from trash"):
            mutations.resolve_status(NoteStatus.TRASHED, status=NoteStatus.ARCHIVED)

    def test_move_note_to_all_notes(self, sample_snapshot, fixed_time):
        """Should clear the folder and keep everything else."""
        before = sample_snapshot.note(1)

        change = mutations.move_note(sample_snapshot, 1, None)

        after = change.snapshot.note(1)
        assert change.message == "Note moved to All Notes"
        assert after.folder_id is None
        assert after.updated_at > fixed_time
        assert after.model_dump(exclude={"folder_id", "updated_at"}) == before.model_dump(
            exclude={"folder_id", "updated_at"}
        )

    def test_move_note_to_folder_message(self, sample_snapshot):
        """Should name the target folder."""
        change = mutations.move_note(sample_snapshot, 3, 3)

        assert change.message == "Note moved to Personal"

    def test_move_note_missing_folder(self, sample_snapshot):
        """Should raise NotFoundError for a missing folder."""
        with pytest.raises(NotFoundError, match="Folder not found"):
            mutations.move_note(sample_snapshot, 3, 99)

    def test_duplicate_note(self, sample_snapshot):
        """Should copy into a new unpinned active note."""
        change = mutations.duplicate_note(sample_snapshot, 1)

        copy = change.value
        assert change.message == "Note duplicated"
        assert copy.id == 6
        assert copy.title == "Roadmap (Copy)"
        assert copy.content == "Q3 goals"
        assert copy.folder_id == 1
        assert copy.label_ids == [1]
        assert copy.is_pinned is False
        assert len(change.snapshot.notes) == 6

    def test_duplicate_archived_note_is_active(self, sample_snapshot):
        """Should make the copy active."""
        change = mutations.duplicate_note(sample_snapshot, 4)

        assert change.value.status is NoteStatus.ACTIVE

    def test_pin_keeps_updated_at(self, sample_snapshot, fixed_time):
        """Should pin without touching status or updated_at."""
        change = mutations.set_pinned(sample_snapshot, 4, True)

        assert change.message == "Note pinned"
        assert change.value.is_pinned
        assert change.value.status is NoteStatus.ARCHIVED
        assert change.value.updated_at == fixed_time

    def test_toggle_pin(self, sample_snapshot):
        """Should flip the pin flag."""
        change = mutations.toggle_pin(sample_snapshot, 1)

        assert change.message == "Note unpinned"
        assert not change.value.is_pinned

    def test_archive_and_unarchive(self, sample_snapshot):
        """Should move a note into the archive and back."""
        archived = mutations.archive_note(sample_snapshot, 2)
        assert archived.message == "Note archived"
        assert archived.value.is_archived

        restored = mutations.unarchive_note(archived.snapshot, 2)
        assert restored.message == "Note restored from archive"
        assert restored.value.status is NoteStatus.ACTIVE

    def test_unarchive_active_note(self, sample_snapshot):
        """Should leave a note that is not archived alone."""
        change = mutations.unarchive_note(sample_snapshot, 2)

        assert change.message == "Note is not archived"
        assert change.snapshot is sample_snapshot

    def test_toggle_archive(self, sample_snapshot):
        """Should archive active notes and unarchive archived ones."""
        assert mutations.toggle_archive(sample_snapshot, 2).value.is_archived
        assert mutations.toggle_archive(sample_snapshot, 4).value.status is NoteStatus.ACTIVE

    def test_archive_trashed_note(self, sample_snapshot):
        """Should refuse to archive a trashed note."""
        with pytest.raises(ValidationError, match="Restore the note from trash"):
            mutations.archive_note(sample_snapshot, 5)

    def test_trash_keeps_pin(self, sample_snapshot):
        """Should trash without unpinning."""
        change = mutations.trash_note(sample_snapshot, 1)

        assert change.message == "Note moved to trash"
        assert change.value.is_trashed
        assert change.value.is_pinned

    def test_restore(self, sample_snapshot):
        """Should bring a trashed note back to active."""
        change = mutations.restore_note(sample_snapshot, 5)

        assert change.message == "Note restored"
        assert change.value.status is NoteStatus.ACTIVE

    def test_restore_live_note(self, sample_snapshot):
        """Should report a note that is not in the trash."""
        assert mutations.restore_note(sample_snapshot, 1).message == "Note is not in trash"

    def test_purge(self, sample_snapshot):
        """Should remove the note for good."""
        change = mutations.purge_note(sample_snapshot, 5)

        assert change.message == "Note deleted permanently"
        assert change.snapshot.note(5) is None

    def test_missing_note(self, sample_snapshot):
        """Should raise NotFoundError for unknown notes."""
        with pytest.raises(NotFoundError, match="Note not found"):
            mutations.trash_note(sample_snapshot, 99)


class TestLabelMutations:
    """Tests for label operations."""

    def test_create_label_default_color(self):
        """Should default to grey."""
        change = mutations.create_label(Snapshot(), "todo")

        assert change.message == "Label created"
        assert change.value.color == "#808080"

    def test_create_label_duplicate(self, sample_snapshot):
        """Should reject a taken name."""
        with pytest.raises(ConflictError, match="Label name already exists"):
            mutations.create_label(sample_snapshot, "urgent")

    def test_create_label_bad_color(self):
        """Should reject malformed colors."""
        with pytest.raises(ValidationError, match="Invalid label color"):
            mutations.create_label(Snapshot(), "x", color="blue")

    def test_create_label_name_too_long(self):
        """Should reject names over 50 characters."""
        with pytest.raises(ValidationError, match="Name too long"):
            mutations.create_label(Snapshot(), "x" * 51)

    def test_update_label_refreshes_notes(self, sample_snapshot):
        """Should show the new name on notes carrying the label."""
        change = mutations.update_label(sample_snapshot, 1, name="critical", color="#000000")

        assert change.message == "Label updated"
        assert change.snapshot.note(1).labels[0].name == "critical"
        assert change.snapshot.note(1).labels[0].color == "#000000"

    def test_delete_label_detaches(self, sample_snapshot):
        """Should remove the label from notes without trashing them."""
        change = mutations.delete_label(sample_snapshot, 1)

        note = change.snapshot.note(1)
        assert change.message == "Label deleted"
        assert note.labels == ()
        assert note.status is NoteStatus.ACTIVE
        assert change.snapshot.label(1) is None

    def test_add_label_idempotent(self, sample_snapshot):
        """Should attach once."""
        first = mutations.add_label(sample_snapshot, 2, 1)
        second = mutations.add_label(first.snapshot, 2, 1)

        assert first.message == "Label added"
        assert second.snapshot is first.snapshot
        assert second.value.label_ids == [1]

    def test_add_unknown_label(self, sample_snapshot):
        """Should raise NotFoundError for unknown labels."""
        with pytest.raises(NotFoundError, match="Label not found"):
            mutations.add_label(sample_snapshot, 2, 9)

    def test_remove_missing_label_is_noop(self, sample_snapshot):
        """Should do nothing when the label is not attached."""
        change = mutations.remove_label(sample_snapshot, 2, 1)

        assert change.message == "Label removed"
        assert change.snapshot is sample_snapshot
