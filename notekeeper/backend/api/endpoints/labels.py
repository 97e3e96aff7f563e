"""
Labels API Endpoints.

REST API endpoints for label management.
"""

from fastapi import APIRouter

from notekeeper.backend.core.dependencies import DbSession, RequestId
from notekeeper.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeeper.backend.schemas.label import LabelCreate, LabelResponse, LabelUpdate
from notekeeper.backend.services.label import LabelService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[LabelResponse]],
    summary="List labels",
)
async def list_labels(
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[LabelResponse]]:
    """List labels."""
    labels = await LabelService(db).list_labels()
    return ApiResponse(
        data=[LabelResponse.model_validate(label) for label in labels],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[LabelResponse],
    status_code=201,
    summary="Create a label",
    description="Create a label. Names are unique; color defaults to #808080.",
)
async def create_label(
    data: LabelCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[LabelResponse]:
    """Create a label."""
    label = await LabelService(db).create_label(data)
    return ApiResponse(
        data=LabelResponse.model_validate(label),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{label_id}",
    response_model=ApiResponse[LabelResponse],
    summary="Get a label",
)
async def get_label(
    label_id: int,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[LabelResponse]:
    """Get a label by ID."""
    label = await LabelService(db).get_label(label_id)
    return ApiResponse(
        data=LabelResponse.model_validate(label),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{label_id}",
    response_model=ApiResponse[LabelResponse],
    summary="Update a label",
)
@router.patch(
    "/{label_id}",
    response_model=ApiResponse[LabelResponse],
    summary="Patch a label",
)
async def update_label(
    label_id: int,
    data: LabelUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[LabelResponse]:
    """Update a label."""
    label = await LabelService(db).update_label(label_id, data)
    return ApiResponse(
        data=LabelResponse.model_validate(label),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{label_id}",
    status_code=204,
    summary="Delete a label",
    description="Delete a label and detach it from every note.",
)
async def delete_label(
    label_id: int,
    db: DbSession,
    request_id: RequestId,
) -> None:
    """Delete a label."""
    await LabelService(db).delete_label(label_id)
