"""
Note Schemas.

Pydantic schemas for note API request/response validation.
Titles and content are trimmed before their length is checked; tags are
trimmed and empty ones dropped.
"""

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, field_validator

from keepnotes.backend.models.note import DEFAULT_NOTE_COLOR, NoteCategory
from keepnotes.backend.schemas.base import CamelModel

MAX_TAGS = 10
MAX_TAG_LENGTH = 30
HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Content = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=10000)
]
Color = Annotated[str, StringConstraints(pattern=HEX_COLOR_PATTERN)]


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Each tag must be {MAX_TAG_LENGTH} characters or less")
        if tag:
            cleaned.append(tag)
    return cleaned


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    title: Title = Field(description="Note title", examples=["Groceries"])
    content: Content = Field(description="Note body", examples=["Milk, eggs, bread"])
    category: NoteCategory = Field(default=NoteCategory.PERSONAL)
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS)
    color: Color = Field(default=DEFAULT_NOTE_COLOR)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, tags: list[str]) -> list[str]:
        return _clean_tags(tags) or []


class NoteUpdate(CamelModel):
    """Schema for updating a note. Only fields present in the body are applied."""

    title: Title | None = None
    content: Content | None = None
    category: NoteCategory | None = None
    tags: list[str] | None = Field(default=None, max_length=MAX_TAGS)
    is_pinned: bool | None = None
    is_archived: bool | None = None
    color: Color | None = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, tags: list[str] | None) -> list[str] | None:
        return _clean_tags(tags)

    def changes(self) -> dict:
        """Fields the client supplied with a non-null value."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class NoteResponse(CamelModel):
    """Schema for a note in API responses."""

    id: str
    title: str
    content: str
    category: NoteCategory
    tags: list[str]
    is_pinned: bool
    is_archived: bool
    color: str
    user_id: str
    created_at: datetime
    updated_at: datetime


class NoteSummary(CamelModel):
    """Compact note shape used on the dashboard."""

    id: str
    title: str
    content: str
    category: NoteCategory
    updated_at: datetime


class NoteDeleted(CamelModel):
    id: str


class NotePinState(CamelModel):
    id: str
    is_pinned: bool


class NoteArchiveState(CamelModel):
    id: str
    is_archived: bool


class PaginationInfo(CamelModel):
    """Page position within a filtered note listing."""

    current_page: int
    total_pages: int
    total_notes: int
    has_next_page: bool
    has_prev_page: bool


class NoteListResponse(CamelModel):
    notes: list[NoteResponse]
    pagination: PaginationInfo


class CategoryCounts(CamelModel):
    personal: int = 0
    work: int = 0
    creative: int = 0
    study: int = 0


class NoteStatistics(CamelModel):
    """Aggregate counts over an owner's non-archived notes."""

    total_notes: int = 0
    pinned_notes: int = 0
    categories: CategoryCounts = Field(default_factory=CategoryCounts)
