"""
Integration Tests for the REST backend of the CLI.

Drives RestAdapter against the application in-process.
"""

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport

from notekeeper.cli.backends import REQUEST_FAILED_MESSAGE, RestAdapter, open_backend
from notekeeper.cli.client import APIClient
from notekeeper.organizer.entities import Folder, Note, NoteStatus
from notekeeper.organizer.filters import NoteView


@pytest.fixture
async def adapter(test_app: FastAPI):
    client = APIClient(
        base_url="http://test",
        timeout=5.0,
        transport=ASGITransport(app=test_app),
    )
    backend = RestAdapter(client, api_prefix="/api")
    yield backend
    await backend.close()


class TestRestAdapterFolders:
    """Folder operations over REST."""

    @pytest.mark.asyncio
    async def test_create_and_tree(self, adapter: RestAdapter):
        """Should create folders and read back the tree."""
        work = await adapter.create_folder("Work")
        assert work.ok
        assert work.message == "Folder created"
        assert isinstance(work.value, Folder)

        await adapter.create_folder("Meetings", work.value.id)
        tree = await adapter.folder_tree()

        assert [node.name for node in tree.value] == ["Work"]
        assert [child.name for child in tree.value[0].children] == ["Meetings"]

    @pytest.mark.asyncio
    async def test_error_envelope_becomes_rejected_outcome(self, adapter: RestAdapter):
        """Should carry the server's message on a rejected outcome."""
        outcome = await adapter.create_folder("Orphan", parent_id=999)

        assert outcome.rejected
        assert not outcome.ok
        assert outcome.message == "Parent folder does not exist"

    @pytest.mark.asyncio
    async def test_delete_folder_asks_before_trashing(self, adapter: RestAdapter):
        """Should consult confirm with the note count and honor a refusal."""
        folder = (await adapter.create_folder("Busy")).value
        await adapter.create_note("a", folder_id=folder.id)
        await adapter.create_note("b", folder_id=folder.id)
        asked = []

        def refuse(count: int) -> bool:
            asked.append(count)
            return False

        outcome = await adapter.delete_folder(folder.id, refuse)

        assert asked == [2]
        assert outcome.message == "Folder deletion cancelled"
        assert (await adapter.folder_tree()).value[0].id == folder.id

    @pytest.mark.asyncio
    async def test_delete_folder_confirmed(self, adapter: RestAdapter):
        """Should delete the folder and trash its notes when confirmed."""
        folder = (await adapter.create_folder("Busy")).value
        await adapter.create_note("a", folder_id=folder.id)

        outcome = await adapter.delete_folder(folder.id, lambda count: True)

        assert outcome.ok
        assert outcome.message == "Folder deleted and notes moved to trash"
        assert outcome.value == 1
        trash = await adapter.trash()
        assert [note.title for note in trash.value] == ["a"]


class TestRestAdapterNotes:
    """Note operations over REST."""

    @pytest.mark.asyncio
    async def test_note_lifecycle(self, adapter: RestAdapter):
        """Should pin, archive, unarchive, trash and restore a note."""
        note = (await adapter.create_note("Plan", "body")).value
        assert isinstance(note, Note)

        pinned = await adapter.set_pinned(note.id, True)
        assert pinned.message == "Note pinned"
        assert pinned.value.is_pinned

        archived = await adapter.archive_note(note.id)
        assert archived.message == "Note archived"
        assert archived.value.status is NoteStatus.ARCHIVED

        unarchived = await adapter.unarchive_note(note.id)
        assert unarchived.value.status is NoteStatus.ACTIVE

        trashed = await adapter.trash_note(note.id)
        assert trashed.message == "Note moved to trash"

        restored = await adapter.restore_note(note.id)
        assert restored.message == "Note restored"
        assert restored.value.status is NoteStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_visible_sections(self, adapter: RestAdapter):
        """Should return pinned and other notes separately."""
        await adapter.create_note("Pinned", is_pinned=True)
        await adapter.create_note("Plain")

        outcome = await adapter.visible(NoteView())

        assert [n.title for n in outcome.value.pinned] == ["Pinned"]
        assert [n.title for n in outcome.value.others] == ["Plain"]

    @pytest.mark.asyncio
    async def test_drop_note_on_folder(self, adapter: RestAdapter):
        """Should move a dragged note and name the target folder."""
        folder = (await adapter.create_folder("Inbox")).value
        note = (await adapter.create_note("Loose")).value

        outcome = await adapter.drop(f"note-{note.id}", f"folder-{folder.id}")

        assert outcome.ok
        assert outcome.message == "Note moved to Inbox"
        assert outcome.value.folder_id == folder.id

    @pytest.mark.asyncio
    async def test_drop_on_itself_does_nothing(self, adapter: RestAdapter):
        """Should ignore a folder dropped onto itself."""
        folder = (await adapter.create_folder("Self")).value

        outcome = await adapter.drop(f"folder-{folder.id}", f"folder-{folder.id}")

        assert not outcome.changed
        assert outcome.message == "Nothing to move"

    @pytest.mark.asyncio
    async def test_labels_and_update(self, adapter: RestAdapter):
        """Should attach labels through update and detach them again."""
        label = (await adapter.create_label("urgent", "#ff0000")).value
        note = (await adapter.create_note("Tagged")).value

        updated = await adapter.update_note(note.id, label_ids=[label.id])
        assert updated.value.label_ids == [label.id]

        removed = await adapter.remove_label(note.id, label.id)
        assert removed.message == "Label removed"

        missing = await adapter.remove_label(note.id, label.id)
        assert missing.rejected
        assert missing.message == "Relationship not found"

    @pytest.mark.asyncio
    async def test_export(self, adapter: RestAdapter):
        """Should return the exported file with its name."""
        note = (await adapter.create_note("Data", '{"a": 1}')).value

        outcome = await adapter.export(note.id, "json")

        assert outcome.value.filename == "note.json"
        assert outcome.value.body == '{"a": 1}'

    @pytest.mark.asyncio
    async def test_export_missing_note(self, adapter: RestAdapter):
        """Should reject exporting a note that does not exist."""
        outcome = await adapter.export(999, "txt")

        assert outcome.rejected
        assert outcome.message == "Note not found"


class TestRestAdapterTransport:
    """Transport failures."""

    @pytest.mark.asyncio
    async def test_connection_error_is_reported(self):
        """Should turn transport errors into a 'Request failed' outcome."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = APIClient(base_url="http://test", timeout=1.0, transport=httpx.MockTransport(refuse))
        async with open_backend(remote=True, client=client) as backend:
            outcome = await backend.create_folder("Work")

        assert outcome.message == REQUEST_FAILED_MESSAGE
        assert outcome.rejected
        assert not outcome.saved
