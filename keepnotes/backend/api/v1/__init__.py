"""
API Router.

Aggregates all endpoint routers.
"""

from fastapi import APIRouter

from keepnotes.backend.api.v1.endpoints import auth, notes, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(users.router, prefix="/users", tags=["users"])
