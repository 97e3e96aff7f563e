"""
API Router.

Aggregates all endpoint routers under the configured API prefix.
"""

from fastapi import APIRouter

from notekeeper.backend.api.endpoints import folders, labels, notes

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(folders.router, prefix="/folders", tags=["folders"])
router.include_router(labels.router, prefix="/labels", tags=["labels"])
