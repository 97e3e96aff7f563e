"""
Folders API Endpoints.

REST API endpoints for folder management.
"""

from fastapi import APIRouter

from notekeeper.backend.core.dependencies import DbSession, RequestId
from notekeeper.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeeper.backend.schemas.folder import FolderCreate, FolderResponse, FolderUpdate
from notekeeper.backend.services.folder import FolderService
from notekeeper.organizer.entities import FolderNode

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[FolderResponse]],
    summary="List folders",
    description="Get every folder as a flat list.",
)
async def list_folders(
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[FolderResponse]]:
    """List folders."""
    folders = await FolderService(db).list_folders()
    return ApiResponse(
        data=[FolderResponse.model_validate(f) for f in folders],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/tree",
    response_model=ApiResponse[list[FolderNode]],
    summary="Folder tree",
    description="Get folders nested under their parents. Folders with a missing parent appear at the root.",
)
async def folder_tree(
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[FolderNode]]:
    """Folder hierarchy."""
    tree = await FolderService(db).folder_tree()
    return ApiResponse(data=tree, metadata=ResponseMetadata(request_id=request_id))


@router.post(
    "",
    response_model=ApiResponse[FolderResponse],
    status_code=201,
    summary="Create a folder",
    description="Create a folder at the root or under an existing parent.",
)
async def create_folder(
    data: FolderCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    """Create a folder."""
    folder = await FolderService(db).create_folder(data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Get a folder",
)
async def get_folder(
    folder_id: int,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    """Get a folder by ID."""
    folder = await FolderService(db).get_folder(folder_id)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Update a folder",
    description="Rename and/or reparent a folder. Only provided fields are updated.",
)
@router.patch(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Patch a folder",
    description="Same as PUT.",
)
async def update_folder(
    folder_id: int,
    data: FolderUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    """Update a folder."""
    folder = await FolderService(db).update_folder(folder_id, data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{folder_id}",
    status_code=204,
    summary="Delete a folder",
    description="Delete a folder. Its notes are moved to the trash and its subfolders move up one level.",
)
async def delete_folder(
    folder_id: int,
    db: DbSession,
    request_id: RequestId,
) -> None:
    """Delete a folder."""
    await FolderService(db).delete_folder(folder_id)
