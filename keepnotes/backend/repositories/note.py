"""
Note Repository.

Data access layer for notes. Every query here is scoped by owner; there is no
way to load a note by id alone.
"""

import operator
from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Any, Literal

from sqlalchemy import ColumnElement, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.backend.models.note import Note, NoteCategory
from keepnotes.backend.repositories.base import BaseRepository

SortField = Literal["createdAt", "updatedAt", "title"]
SortOrder = Literal["asc", "desc"]

# Relevance weight of a search term hit per field
SEARCH_WEIGHTS = {"title": 10, "tags": 8, "content": 5}

_SORT_COLUMNS = {
    "createdAt": Note.created_at,
    "updatedAt": Note.updated_at,
    "title": Note.title,
}


@dataclass(frozen=True)
class NoteQuery:
    """Filter, sort and window for listing one owner's notes."""

    owner_id: str
    is_archived: bool = False
    category: NoteCategory | None = None
    is_pinned: bool | None = None
    search: str | None = None
    sort_by: SortField = "updatedAt"
    sort_order: SortOrder = "desc"
    offset: int = 0
    limit: int = 20


def search_terms(search: str | None) -> list[str]:
    """Split a free-text query into distinct lowercase terms."""
    if not search:
        return []
    return list(dict.fromkeys(term.lower() for term in search.split()))


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _term_hits(term: str) -> dict[str, ColumnElement[bool]]:
    pattern = _like_pattern(term)
    return {
        "title": Note.title.ilike(pattern, escape="\\"),
        "tags": Note.tag_text.ilike(pattern, escape="\\"),
        "content": Note.content.ilike(pattern, escape="\\"),
    }


def search_predicate(terms: list[str]) -> ColumnElement[bool]:
    """A note matches when any term occurs in its title, tags or content."""
    return or_(*(hit for term in terms for hit in _term_hits(term).values()))


def search_score(terms: list[str]) -> ColumnElement[Any]:
    """Weighted relevance: title hits outrank tag hits, which outrank content hits."""
    parts = [
        case((hit, SEARCH_WEIGHTS[field]), else_=0)
        for term in terms
        for field, hit in _term_hits(term).items()
    ]
    return reduce(operator.add, parts)


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Adds owner-scoped lookups, the filtered listing, and aggregate counts.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, note_id: str, owner_id: str) -> Note | None:
        """
        Get a note by id and owner in one predicate.

        Returns None both when the note does not exist and when it belongs
        to someone else.
        """
        result = await self.session.execute(
            select(Note).where(Note.id == note_id, Note.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    def _conditions(self, query: NoteQuery) -> list[ColumnElement[bool]]:
        conditions = [
            Note.user_id == query.owner_id,
            Note.is_archived == query.is_archived,
        ]
        if query.category is not None:
            conditions.append(Note.category == query.category)
        if query.is_pinned is not None:
            conditions.append(Note.is_pinned == query.is_pinned)
        terms = search_terms(query.search)
        if terms:
            conditions.append(search_predicate(terms))
        return conditions

    async def list_notes(self, query: NoteQuery) -> list[Note]:
        """
        List one owner's notes matching the query.

        With a search, results are ranked by relevance first and the
        requested sort breaks ties.
        """
        sort_column = _SORT_COLUMNS[query.sort_by]
        if query.sort_order == "desc":
            ordering = [sort_column.desc(), Note.id.desc()]
        else:
            ordering = [sort_column.asc(), Note.id.asc()]

        terms = search_terms(query.search)
        if terms:
            ordering.insert(0, search_score(terms).desc())

        result = await self.session.execute(
            select(Note)
            .where(*self._conditions(query))
            .order_by(*ordering)
            .offset(query.offset)
            .limit(query.limit)
        )
        return list(result.scalars().all())

    async def count_notes(self, query: NoteQuery) -> int:
        """Count all notes matching the query, ignoring offset and limit."""
        result = await self.session.execute(
            select(func.count()).select_from(Note).where(*self._conditions(query))
        )
        return result.scalar_one()

    async def category_counts(self, owner_id: str) -> list[tuple[NoteCategory, int, int]]:
        """
        Group an owner's non-archived notes by category.

        Returns:
            Rows of (category, note count, pinned count)
        """
        pinned = func.sum(case((Note.is_pinned == True, 1), else_=0))  # noqa: E712
        result = await self.session.execute(
            select(Note.category, func.count(), pinned)
            .where(
                Note.user_id == owner_id,
                Note.is_archived == False,  # noqa: E712
            )
            .group_by(Note.category)
        )
        return [(row[0], int(row[1]), int(row[2] or 0)) for row in result.all()]

    async def list_recent(
        self,
        owner_id: str,
        pinned_only: bool = False,
        limit: int = 5,
    ) -> list[Note]:
        """Most recently updated non-archived notes, optionally only pinned ones."""
        query = select(Note).where(
            Note.user_id == owner_id,
            Note.is_archived == False,  # noqa: E712
        )
        if pinned_only:
            query = query.where(Note.is_pinned == True)  # noqa: E712
        result = await self.session.execute(
            query.order_by(Note.updated_at.desc(), Note.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_updated_between(
        self,
        owner_id: str,
        start: datetime,
        end: datetime,
    ) -> int:
        """Count an owner's notes (archived included) updated in [start, end)."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Note)
            .where(
                Note.user_id == owner_id,
                Note.updated_at >= start,
                Note.updated_at < end,
            )
        )
        return result.scalar_one()
