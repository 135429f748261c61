"""
Note Service.

Business logic layer for notes. Every operation takes the acting user's id
and never touches a note owned by anyone else; a foreign note is reported
exactly like a missing one.
"""

import math

from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.backend.core.exceptions import NotFoundError
from keepnotes.backend.core.utils import local_day_bounds_utc
from keepnotes.backend.models.note import Note
from keepnotes.backend.repositories.note import NoteQuery, NoteRepository
from keepnotes.backend.schemas.note import (
    CategoryCounts,
    NoteCreate,
    NoteStatistics,
    NoteUpdate,
    PaginationInfo,
)
from keepnotes.backend.services.base import BaseService

NOTE_NOT_FOUND_MESSAGE = (
    "The requested note does not exist or you do not have permission to access it."
)


def build_pagination(page: int, limit: int, total: int) -> PaginationInfo:
    """Page position for a listing of `total` matching notes."""
    total_pages = math.ceil(total / limit)
    return PaginationInfo(
        current_page=page,
        total_pages=total_pages,
        total_notes=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, owner-scoped retrieval and mutation, listing,
    and statistics.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def _get_owned_or_404(self, owner_id: str, note_id: str) -> Note:
        note = await self.repo.get_owned(note_id, owner_id)
        if note is None:
            raise NotFoundError(NOTE_NOT_FOUND_MESSAGE)
        return note

    async def create_note(self, owner_id: str, data: NoteCreate) -> Note:
        """
        Create a new note owned by `owner_id`.

        Args:
            owner_id: Creating user
            data: Validated, trimmed note fields

        Returns:
            Created note
        """
        self._log_operation("Creating note", user_id=owner_id, category=data.category.value)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title,
                content=data.content,
                category=data.category,
                tags=data.tags,
                color=data.color,
                user_id=owner_id,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, owner_id: str, note_id: str) -> Note:
        """
        Get one of the owner's notes.

        Raises:
            NotFoundError: If the note is missing or owned by another user
        """
        return await self._get_owned_or_404(owner_id, note_id)

    async def list_notes(
        self,
        query: NoteQuery,
        page: int,
    ) -> tuple[list[Note], PaginationInfo]:
        """
        List notes with the total count for pagination.

        The count runs as its own query with the same predicate as the
        listing.

        Returns:
            Tuple of (notes on this page, pagination info)
        """
        self._log_debug(
            "Listing notes",
            user_id=query.owner_id,
            archived=query.is_archived,
            searching=bool(query.search),
            page=page,
        )
        notes = await self.repo.list_notes(query)
        total = await self.repo.count_notes(query)
        return notes, build_pagination(page, query.limit, total)

    async def update_note(self, owner_id: str, note_id: str, data: NoteUpdate) -> Note:
        """
        Update one of the owner's notes. Only supplied fields change.

        Raises:
            NotFoundError: If the note is missing or owned by another user
        """
        note = await self._get_owned_or_404(owner_id, note_id)
        changes = data.changes()

        if not changes:
            return note

        self._log_operation("Updating note", note_id=note_id, fields=list(changes))

        return await self._execute_db_operation(
            "update_note",
            self.repo.apply(note, **changes),
        )

    async def delete_note(self, owner_id: str, note_id: str) -> str:
        """
        Permanently delete one of the owner's notes.

        Returns:
            The deleted note's id

        Raises:
            NotFoundError: If the note is missing or owned by another user
        """
        note = await self._get_owned_or_404(owner_id, note_id)
        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation("delete_note", self.repo.remove(note))
        return note_id

    async def toggle_pin(self, owner_id: str, note_id: str) -> Note:
        """Flip the pinned flag of one of the owner's notes."""
        note = await self._get_owned_or_404(owner_id, note_id)
        self._log_operation("Toggling pin", note_id=note_id, pinned=not note.is_pinned)
        return await self._execute_db_operation(
            "toggle_pin",
            self.repo.apply(note, is_pinned=not note.is_pinned),
        )

    async def toggle_archive(self, owner_id: str, note_id: str) -> Note:
        """Flip the archived flag of one of the owner's notes."""
        note = await self._get_owned_or_404(owner_id, note_id)
        self._log_operation("Toggling archive", note_id=note_id, archived=not note.is_archived)
        return await self._execute_db_operation(
            "toggle_archive",
            self.repo.apply(note, is_archived=not note.is_archived),
        )

    async def get_statistics(self, owner_id: str) -> NoteStatistics:
        """
        Count the owner's non-archived notes, pinned ones, and per category.

        Always returns the full shape; an owner without notes gets zeros.
        """
        stats = NoteStatistics()
        categories = CategoryCounts()
        for category, count, pinned in await self.repo.category_counts(owner_id):
            setattr(categories, category.value, count)
            stats.total_notes += count
            stats.pinned_notes += pinned
        stats.categories = categories
        return stats

    async def recent_notes(self, owner_id: str, limit: int = 5) -> list[Note]:
        """Most recently updated non-archived notes."""
        return await self.repo.list_recent(owner_id, limit=limit)

    async def recent_pinned_notes(self, owner_id: str, limit: int = 5) -> list[Note]:
        """Most recently updated pinned, non-archived notes."""
        return await self.repo.list_recent(owner_id, pinned_only=True, limit=limit)

    async def count_updated_today(self, owner_id: str) -> int:
        """Notes updated since local midnight, archived ones included."""
        start, end = local_day_bounds_utc()
        return await self.repo.count_updated_between(owner_id, start, end)
