"""
Integration Tests for Folders API.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.models.folder import Folder
from notekeeper.backend.models.note import Note
from notekeeper.organizer.entities import NoteStatus


async def _create_folder(client: AsyncClient, name: str, parent_id: int | None = None) -> dict:
    response = await client.post("/api/folders", json={"name": name, "parent_id": parent_id})
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateFolder:
    """Tests for POST /api/folders."""

    @pytest.mark.asyncio
    async def test_create_root_folder(self, client: AsyncClient, api):
        """Should create a folder at the top level."""
        response = await client.post("/api/folders", json={"name": "Work"})

        data = api.assert_success(response, expected_status=201)
        assert data["data"]["name"] == "Work"
        assert data["data"]["parent_id"] is None
        assert data["metadata"]["request_id"]

    @pytest.mark.asyncio
    async def test_create_nested_folder(self, client: AsyncClient, api):
        """Should create a folder under an existing parent."""
        parent = await _create_folder(client, "Work")

        response = await client.post("/api/folders", json={"name": "Meetings", "parent_id": parent["id"]})

        data = api.assert_success(response, expected_status=201)
        assert data["data"]["parent_id"] == parent["id"]

    @pytest.mark.asyncio
    async def test_create_folder_missing_parent(self, client: AsyncClient, api):
        """Should reject a parent that does not exist."""
        response = await client.post("/api/folders", json={"name": "Orphan", "parent_id": 999})

        data = api.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        assert data["error"]["message"] == "Parent folder does not exist"

    @pytest.mark.asyncio
    async def test_create_folder_empty_name(self, client: AsyncClient, api):
        """Should reject an empty name."""
        response = await client.post("/api/folders", json={"name": ""})

        api.assert_validation_error(response, field="name")


class TestFolderTree:
    """Tests for GET /api/folders and /api/folders/tree."""

    @pytest.mark.asyncio
    async def test_list_folders(self, client: AsyncClient, api):
        """Should list folders in id order."""
        await _create_folder(client, "B")
        await _create_folder(client, "A")

        data = api.assert_success(await client.get("/api/folders"))

        assert [f["name"] for f in data["data"]] == ["B", "A"]

    @pytest.mark.asyncio
    async def test_tree(self, client: AsyncClient, api):
        """Should nest children under their parents."""
        work = await _create_folder(client, "Work")
        await _create_folder(client, "Meetings", work["id"])
        await _create_folder(client, "Personal")

        data = api.assert_success(await client.get("/api/folders/tree"))

        roots = data["data"]
        assert [r["name"] for r in roots] == ["Work", "Personal"]
        assert [c["name"] for c in roots[0]["children"]] == ["Meetings"]
        assert roots[1]["children"] == []


class TestUpdateFolder:
    """Tests for PUT/PATCH /api/folders/{folder_id}."""

    @pytest.mark.asyncio
    async def test_rename(self, client: AsyncClient, api):
        """Should rename and keep the parent."""
        work = await _create_folder(client, "Work")
        child = await _create_folder(client, "Misc", work["id"])

        data = api.assert_success(await client.patch(f"/api/folders/{child['id']}", json={"name": "Notes"}))

        assert data["data"]["name"] == "Notes"
        assert data["data"]["parent_id"] == work["id"]

    @pytest.mark.asyncio
    async def test_move_to_top_level(self, client: AsyncClient, api):
        """Should clear the parent when parent_id is null."""
        work = await _create_folder(client, "Work")
        child = await _create_folder(client, "Misc", work["id"])

        data = api.assert_success(await client.put(f"/api/folders/{child['id']}", json={"parent_id": None}))

        assert data["data"]["parent_id"] is None

    @pytest.mark.asyncio
    async def test_move_into_descendant_fails(self, client: AsyncClient, api):
        """Should refuse to create a cycle."""
        work = await _create_folder(client, "Work")
        child = await _create_folder(client, "Meetings", work["id"])

        response = await client.patch(f"/api/folders/{work['id']}", json={"parent_id": child["id"]})

        data = api.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        assert "subfolders" in data["error"]["message"]

    @pytest.mark.asyncio
    async def test_update_missing_folder(self, client: AsyncClient, api):
        """Should return 404 for a missing folder."""
        response = await client.patch("/api/folders/999", json={"name": "x"})

        api.assert_error(response, 404, "RES_NOT_FOUND")


class TestDeleteFolder:
    """Tests for DELETE /api/folders/{folder_id}."""

    @pytest.mark.asyncio
    async def test_delete_empty_folder(self, client: AsyncClient, api):
        """Should delete a folder with no notes."""
        folder = await _create_folder(client, "Empty")

        response = await client.delete(f"/api/folders/{folder['id']}")

        assert response.status_code == 204
        api.assert_error(await client.get(f"/api/folders/{folder['id']}"), 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_delete_folder_trashes_notes(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        api,
    ):
        """Should move the folder's notes to the trash and clear their folder."""
        folder = Folder(name="Doomed")
        db_session.add(folder)
        await db_session.flush()
        notes = [Note(title=f"n{i}", folder_id=folder.id) for i in range(3)]
        other = Note(title="safe")
        db_session.add_all([*notes, other])
        await db_session.flush()

        response = await client.delete(f"/api/folders/{folder.id}")
        assert response.status_code == 204

        data = api.assert_success(await client.get("/api/notes"))
        by_title = {n["title"]: n for n in data["data"]}
        for i in range(3):
            assert by_title[f"n{i}"]["status"] == NoteStatus.TRASHED.value
            assert by_title[f"n{i}"]["folder_id"] is None
        assert by_title["safe"]["status"] == "active"

    @pytest.mark.asyncio
    async def test_delete_folder_reparents_children(self, client: AsyncClient, api):
        """Should move subfolders up to the deleted folder's parent."""
        root = await _create_folder(client, "Root")
        middle = await _create_folder(client, "Middle", root["id"])
        leaf = await _create_folder(client, "Leaf", middle["id"])

        response = await client.delete(f"/api/folders/{middle['id']}")
        assert response.status_code == 204

        data = api.assert_success(await client.get(f"/api/folders/{leaf['id']}"))
        assert data["data"]["parent_id"] == root["id"]
