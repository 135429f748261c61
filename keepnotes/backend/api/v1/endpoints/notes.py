"""
Notes API Endpoints.

REST API endpoints for note management. Every route requires a bearer
token and only ever sees the caller's own notes.
"""

from fastapi import APIRouter, Depends, Query

from keepnotes.backend.core.dependencies import CurrentUser, DbSession
from keepnotes.backend.core.pagination import PaginationParams, get_pagination_params
from keepnotes.backend.models.note import NoteCategory
from keepnotes.backend.repositories.note import NoteQuery, SortField, SortOrder
from keepnotes.backend.schemas.base import ApiResponse
from keepnotes.backend.schemas.note import (
    NoteArchiveState,
    NoteCreate,
    NoteDeleted,
    NoteListResponse,
    NotePinState,
    NoteResponse,
    NoteStatistics,
    NoteUpdate,
)
from keepnotes.backend.services.note import NoteService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[NoteListResponse],
    summary="List notes",
    description="Filter, search, sort and page through the caller's notes.",
)
async def list_notes(
    db: DbSession,
    user: CurrentUser,
    pagination: PaginationParams = Depends(get_pagination_params),
    category: NoteCategory | None = Query(default=None),
    is_pinned: bool | None = Query(default=None, alias="isPinned"),
    is_archived: bool = Query(
        default=False,
        alias="isArchived",
        description="Show only archived notes instead of only active ones",
    ),
    search: str | None = Query(default=None, max_length=200),
    sort_by: SortField = Query(default="updatedAt", alias="sortBy"),
    sort_order: SortOrder = Query(default="desc", alias="sortOrder"),
) -> ApiResponse[NoteListResponse]:
    query = NoteQuery(
        owner_id=user.id,
        is_archived=is_archived,
        category=category,
        is_pinned=is_pinned,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    notes, page_info = await NoteService(db).list_notes(query, page=pagination.page)
    return ApiResponse(
        message="Notes retrieved successfully",
        data=NoteListResponse(
            notes=[NoteResponse.model_validate(note) for note in notes],
            pagination=page_info,
        ),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).create_note(user.id, data)
    return ApiResponse(
        message="Note created successfully",
        data=NoteResponse.model_validate(note),
    )


# Declared before /{note_id} so "stats" is not captured as an id
@router.get(
    "/stats",
    response_model=ApiResponse[NoteStatistics],
    summary="Note statistics",
    description="Counts over the caller's non-archived notes.",
)
async def note_statistics(
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteStatistics]:
    stats = await NoteService(db).get_statistics(user.id)
    return ApiResponse(message="Statistics retrieved successfully", data=stats)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).get_note(user.id, note_id)
    return ApiResponse(
        message="Note retrieved successfully",
        data=NoteResponse.model_validate(note),
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Only fields present in the body are changed.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).update_note(user.id, note_id, data)
    return ApiResponse(
        message="Note updated successfully",
        data=NoteResponse.model_validate(note),
    )


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[NoteDeleted],
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteDeleted]:
    deleted_id = await NoteService(db).delete_note(user.id, note_id)
    return ApiResponse(message="Note deleted successfully", data=NoteDeleted(id=deleted_id))


@router.post(
    "/{note_id}/pin",
    response_model=ApiResponse[NotePinState],
    summary="Toggle pin",
)
async def toggle_pin(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NotePinState]:
    note = await NoteService(db).toggle_pin(user.id, note_id)
    verb = "pinned" if note.is_pinned else "unpinned"
    return ApiResponse(
        message=f"Note {verb} successfully",
        data=NotePinState(id=note.id, is_pinned=note.is_pinned),
    )


@router.post(
    "/{note_id}/archive",
    response_model=ApiResponse[NoteArchiveState],
    summary="Toggle archive",
)
async def toggle_archive(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteArchiveState]:
    note = await NoteService(db).toggle_archive(user.id, note_id)
    verb = "archived" if note.is_archived else "unarchived"
    return ApiResponse(
        message=f"Note {verb} successfully",
        data=NoteArchiveState(id=note.id, is_archived=note.is_archived),
    )
