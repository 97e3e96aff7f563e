"""
CLI Backends.

The two persistence modes behind one async interface. Every method
returns an Outcome: `message` is what the user sees, `value` carries
the entity or view that was read or changed.

- LocalBackend drives a Workspace flushed to JSON files (client-only mode)
- RestAdapter calls the REST API through APIClient (server mode)

Usage:
    async with open_backend(remote=False, storage_dir=None) as backend:
        outcome = await backend.create_folder("Work")
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
from pydantic import TypeAdapter

from notekeeper.backend.core.config import get_app_config, get_workspace_dir
from notekeeper.backend.core.logging import get_logger, log_with_source
from notekeeper.cli.client import APIClient
from notekeeper.organizer.dragdrop import MoveNote, ReparentFolder, resolve_drop
from notekeeper.organizer.entities import Folder, FolderNode, Label, Note
from notekeeper.organizer.export import ExportedFile, render_export
from notekeeper.organizer.filters import NoteSections, NoteView, trashed_notes
from notekeeper.organizer.mutations import ALL_NOTES_NAME, ConfirmCallback
from notekeeper.organizer.storage import LocalStorage
from notekeeper.organizer.textstats import TextStats, text_stats
from notekeeper.organizer.workspace import DROP_IGNORED_MESSAGE, Outcome, Workspace

logger = get_logger(__name__)

REQUEST_FAILED_MESSAGE = "Request failed"
NOTE_NOT_FOUND_MESSAGE = "Note not found"

_tree = TypeAdapter(list[FolderNode])
_labels = TypeAdapter(list[Label])
_notes = TypeAdapter(list[Note])


class LocalBackend:
    """Client-only mode: a Workspace over local storage."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    async def close(self) -> None:
        return None

    # Reads

    async def folder_tree(self) -> Outcome:
        return Outcome(message="", value=self.workspace.hierarchy())

    async def list_labels(self) -> Outcome:
        return Outcome(message="", value=list(self.workspace.snapshot.labels))

    async def visible(self, view: NoteView) -> Outcome:
        return Outcome(message="", value=self.workspace.visible(view))

    async def trash(self) -> Outcome:
        return Outcome(message="", value=trashed_notes(self.workspace.snapshot.notes))

    async def get_note(self, note_id: int) -> Outcome:
        note = self.workspace.get_note(note_id)
        if note is None:
            return Outcome(message=NOTE_NOT_FOUND_MESSAGE, rejected=True)
        return Outcome(message="", value=note)

    async def stats(self, note_id: int) -> Outcome:
        found = await self.get_note(note_id)
        if not found.ok:
            return found
        return Outcome(message="", value=text_stats(found.value.content))

    async def export(self, note_id: int, fmt: str) -> Outcome:
        found = await self.get_note(note_id)
        if not found.ok:
            return found
        return Outcome(message="", value=render_export(found.value.content, fmt))

    # Folders

    async def create_folder(self, name: str, parent_id: int | None = None) -> Outcome:
        return self.workspace.create_folder(name, parent_id)

    async def rename_folder(self, folder_id: int, name: str) -> Outcome:
        return self.workspace.rename_folder(folder_id, name)

    async def move_folder(self, folder_id: int, parent_id: int | None) -> Outcome:
        return self.workspace.move_folder(folder_id, parent_id)

    async def delete_folder(self, folder_id: int, confirm: ConfirmCallback | None = None) -> Outcome:
        return self.workspace.delete_folder(folder_id, confirm)

    # Notes

    async def create_note(
        self,
        title: str,
        content: str = "",
        folder_id: int | None = None,
        label_ids: list[int] | None = None,
        is_pinned: bool = False,
    ) -> Outcome:
        return self.workspace.create_note(title, content, folder_id, label_ids, is_pinned)

    async def update_note(self, note_id: int, **changes: Any) -> Outcome:
        return self.workspace.update_note(note_id, **changes)

    async def move_note(self, note_id: int, folder_id: int | None) -> Outcome:
        return self.workspace.move_note(note_id, folder_id)

    async def duplicate_note(self, note_id: int) -> Outcome:
        return self.workspace.duplicate_note(note_id)

    async def set_pinned(self, note_id: int, pinned: bool) -> Outcome:
        return self.workspace.set_pinned(note_id, pinned)

    async def archive_note(self, note_id: int) -> Outcome:
        return self.workspace.archive_note(note_id)

    async def unarchive_note(self, note_id: int) -> Outcome:
        return self.workspace.unarchive_note(note_id)

    async def trash_note(self, note_id: int) -> Outcome:
        return self.workspace.trash_note(note_id)

    async def restore_note(self, note_id: int) -> Outcome:
        return self.workspace.restore_note(note_id)

    async def purge_note(self, note_id: int) -> Outcome:
        return self.workspace.purge_note(note_id)

    # Labels

    async def create_label(self, name: str, color: str | None = None) -> Outcome:
        return self.workspace.create_label(name, color)

    async def update_label(self, label_id: int, **changes: Any) -> Outcome:
        return self.workspace.update_label(label_id, **changes)

    async def delete_label(self, label_id: int) -> Outcome:
        return self.workspace.delete_label(label_id)

    async def add_label(self, note_id: int, label_id: int) -> Outcome:
        return self.workspace.add_label(note_id, label_id)

    async def remove_label(self, note_id: int, label_id: int) -> Outcome:
        return self.workspace.remove_label(note_id, label_id)

    async def drop(self, source_id: str, target_id: str) -> Outcome:
        return self.workspace.drop(source_id, target_id)


class RestAdapter:
    """
    Server mode: the same operations as REST calls.

    Error envelopes become rejected Outcomes carrying the server's message.
    Transport failures are logged and reported as "Request failed".
    """

    def __init__(self, client: APIClient, api_prefix: str = "/api") -> None:
        self.client = client
        self.api_prefix = api_prefix.rstrip("/")

    async def close(self) -> None:
        await self.client.close()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response | Outcome:
        try:
            return await self.client.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError:
            return Outcome(message=REQUEST_FAILED_MESSAGE, rejected=True, saved=False)

    def _rejected(self, response: httpx.Response, body: dict[str, Any], path: str) -> Outcome:
        error = body.get("error") or {}
        log_with_source(
            logger, "cli", "warning", "API error response",
            path=path, status_code=response.status_code, code=error.get("code"),
        )
        return Outcome(message=error.get("message", REQUEST_FAILED_MESSAGE), rejected=True)

    @staticmethod
    def _body(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    async def _call(
        self,
        method: str,
        path: str,
        message: str = "",
        parse: Callable[[Any], Any] | None = None,
        **kwargs: Any,
    ) -> Outcome:
        response = await self._send(method, path, **kwargs)
        if isinstance(response, Outcome):
            return response

        changed = method != "GET"
        if response.status_code == 204:
            return Outcome(message=message, changed=changed)

        body = self._body(response)
        if response.is_error or not body.get("success", False):
            return self._rejected(response, body, path)

        data = body.get("data")
        value = parse(data) if parse is not None and data is not None else data
        return Outcome(message=message, value=value, changed=changed)

    # Reads

    async def folder_tree(self) -> Outcome:
        return await self._call("GET", "/folders/tree", parse=_tree.validate_python)

    async def list_labels(self) -> Outcome:
        return await self._call("GET", "/labels", parse=_labels.validate_python)

    async def visible(self, view: NoteView) -> Outcome:
        params: dict[str, Any] = {"search": view.search_term, "archived": view.show_archived}
        if view.folder_id is not None:
            params["folder_id"] = view.folder_id
        if view.label_id is not None:
            params["label_id"] = view.label_id

        def parse(data: dict[str, Any]) -> NoteSections:
            return NoteSections(
                pinned=_notes.validate_python(data["pinned"]),
                others=_notes.validate_python(data["others"]),
            )

        return await self._call("GET", "/notes/visible", parse=parse, params=params)

    async def trash(self) -> Outcome:
        outcome = await self._call("GET", "/notes", parse=_notes.validate_python)
        if not outcome.ok:
            return outcome
        return Outcome(message="", value=trashed_notes(outcome.value))

    async def get_note(self, note_id: int) -> Outcome:
        return await self._call("GET", f"/notes/{note_id}", parse=Note.model_validate)

    async def stats(self, note_id: int) -> Outcome:
        return await self._call("GET", f"/notes/{note_id}/stats", parse=TextStats.model_validate)

    async def export(self, note_id: int, fmt: str) -> Outcome:
        response = await self._send("GET", f"/notes/{note_id}/export", params={"format": fmt})
        if isinstance(response, Outcome):
            return response
        if response.is_error:
            return self._rejected(response, self._body(response), f"/notes/{note_id}/export")
        disposition = response.headers.get("content-disposition", "")
        filename = disposition.rpartition("filename=")[2].strip('"') or "note.txt"
        return Outcome(
            message="",
            value=ExportedFile(
                filename=filename,
                media_type=response.headers.get("content-type", "text/plain"),
                body=response.text,
            ),
        )

    # Folders

    async def create_folder(self, name: str, parent_id: int | None = None) -> Outcome:
        return await self._call(
            "POST", "/folders", "Folder created", Folder.model_validate,
            json={"name": name, "parent_id": parent_id},
        )

    async def rename_folder(self, folder_id: int, name: str) -> Outcome:
        return await self._call(
            "PATCH", f"/folders/{folder_id}", "Folder renamed", Folder.model_validate,
            json={"name": name},
        )

    async def move_folder(self, folder_id: int, parent_id: int | None) -> Outcome:
        return await self._call(
            "PATCH", f"/folders/{folder_id}", "Folder moved", Folder.model_validate,
            json={"parent_id": parent_id},
        )

    async def delete_folder(self, folder_id: int, confirm: ConfirmCallback | None = None) -> Outcome:
        """Ask for confirmation when the folder holds notes, then delete it."""
        listing = await self._call("GET", "/notes", parse=_notes.validate_python)
        if not listing.ok:
            return listing
        affected = sum(1 for note in listing.value if note.folder_id == folder_id)
        if affected and confirm is not None and not confirm(affected):
            return Outcome(message="Folder deletion cancelled", value=0)

        message = "Folder deleted and notes moved to trash" if affected else "Folder deleted"
        outcome = await self._call("DELETE", f"/folders/{folder_id}", message)
        if outcome.ok:
            return Outcome(message=outcome.message, value=affected, changed=True)
        return outcome

    # Notes

    async def create_note(
        self,
        title: str,
        content: str = "",
        folder_id: int | None = None,
        label_ids: list[int] | None = None,
        is_pinned: bool = False,
    ) -> Outcome:
        return await self._call(
            "POST", "/notes", "Note created", Note.model_validate,
            json={
                "title": title,
                "content": content,
                "folder_id": folder_id,
                "labels": label_ids or [],
                "is_pinned": is_pinned,
            },
        )

    async def update_note(self, note_id: int, **changes: Any) -> Outcome:
        payload = dict(changes)
        if "label_ids" in payload:
            payload["labels"] = payload.pop("label_ids")
        if "status" in payload and payload["status"] is not None:
            payload["status"] = getattr(payload["status"], "value", payload["status"])
        return await self._call(
            "PATCH", f"/notes/{note_id}", "Note updated", Note.model_validate,
            json=payload,
        )

    async def move_note(self, note_id: int, folder_id: int | None) -> Outcome:
        name = ALL_NOTES_NAME
        if folder_id is not None:
            folder = await self._call("GET", f"/folders/{folder_id}", parse=Folder.model_validate)
            if not folder.ok:
                return folder
            name = folder.value.name
        return await self._call(
            "POST", f"/notes/{note_id}/move", f"Note moved to {name}", Note.model_validate,
            json={"folder_id": folder_id},
        )

    async def duplicate_note(self, note_id: int) -> Outcome:
        return await self._call("POST", f"/notes/{note_id}/duplicate", "Note duplicated", Note.model_validate)

    async def set_pinned(self, note_id: int, pinned: bool) -> Outcome:
        action, message = ("pin", "Note pinned") if pinned else ("unpin", "Note unpinned")
        return await self._call("POST", f"/notes/{note_id}/{action}", message, Note.model_validate)

    async def archive_note(self, note_id: int) -> Outcome:
        return await self._call("POST", f"/notes/{note_id}/archive", "Note archived", Note.model_validate)

    async def unarchive_note(self, note_id: int) -> Outcome:
        return await self._call(
            "POST", f"/notes/{note_id}/unarchive", "Note restored from archive", Note.model_validate,
        )

    async def trash_note(self, note_id: int) -> Outcome:
        return await self._call("POST", f"/notes/{note_id}/trash", "Note moved to trash", Note.model_validate)

    async def restore_note(self, note_id: int) -> Outcome:
        return await self._call("POST", f"/notes/{note_id}/restore", "Note restored", Note.model_validate)

    async def purge_note(self, note_id: int) -> Outcome:
        return await self._call("DELETE", f"/notes/{note_id}", "Note deleted permanently")

    # Labels

    async def create_label(self, name: str, color: str | None = None) -> Outcome:
        payload: dict[str, Any] = {"name": name}
        if color is not None:
            payload["color"] = color
        return await self._call("POST", "/labels", "Label created", Label.model_validate, json=payload)

    async def update_label(self, label_id: int, **changes: Any) -> Outcome:
        return await self._call(
            "PATCH", f"/labels/{label_id}", "Label updated", Label.model_validate,
            json=changes,
        )

    async def delete_label(self, label_id: int) -> Outcome:
        return await self._call("DELETE", f"/labels/{label_id}", "Label deleted")

    async def add_label(self, note_id: int, label_id: int) -> Outcome:
        return await self._call("POST", f"/notes/{note_id}/labels/{label_id}", "Label added")

    async def remove_label(self, note_id: int, label_id: int) -> Outcome:
        return await self._call("DELETE", f"/notes/{note_id}/labels/{label_id}", "Label removed")

    async def drop(self, source_id: str, target_id: str) -> Outcome:
        action = resolve_drop(source_id, target_id)
        if isinstance(action, MoveNote):
            return await self.move_note(action.note_id, action.folder_id)
        if isinstance(action, ReparentFolder):
            return await self.move_folder(action.folder_id, action.parent_id)
        return Outcome(message=DROP_IGNORED_MESSAGE)


Backend = LocalBackend | RestAdapter


@asynccontextmanager
async def open_backend(
    remote: bool = False,
    storage_dir: Path | None = None,
    client: APIClient | None = None,
) -> AsyncIterator[Backend]:
    """
    Open the backend for the selected mode and close it afterwards.

    Raises:
        StorageError: If local storage exists but cannot be read
    """
    if remote:
        backend: Backend = RestAdapter(
            client or APIClient(),
            api_prefix=get_app_config().application.api_prefix,
        )
    else:
        directory = storage_dir or get_workspace_dir()
        backend = LocalBackend(Workspace.open(LocalStorage(directory)))
    try:
        yield backend
    finally:
        await backend.close()
