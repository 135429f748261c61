"""
Note Model.

Database model for notes. Every note belongs to exactly one user.
"""

import enum

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from keepnotes.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_NOTE_COLOR = "#ffffff"
TAG_SEPARATOR = "\n"


class NoteCategory(str, enum.Enum):
    """Fixed set of note categories."""

    PERSONAL = "personal"
    WORK = "work"
    CREATIVE = "creative"
    STUDY = "study"


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    user_id is set at creation and never updated. Lookups always combine
    the note id with the owner id.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[NoteCategory] = mapped_column(
        Enum(
            NoteCategory,
            name="note_category",
            native_enum=False,
            length=16,
            values_callable=lambda categories: [c.value for c in categories],
        ),
        default=NoteCategory.PERSONAL,
        nullable=False,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # Tags joined by newlines, searched as plain text
    tag_text: Mapped[str] = mapped_column(Text, default="", server_default="", nullable=False)
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    color: Mapped[str] = mapped_column(
        String(7),
        default=DEFAULT_NOTE_COLOR,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    @validates("tags")
    def _sync_tag_text(self, key: str, tags: list[str]) -> list[str]:
        self.tag_text = TAG_SEPARATOR.join(tags)
        return tags

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"


Index("ix_notes_user_created", Note.user_id, Note.created_at.desc())
Index("ix_notes_user_category", Note.user_id, Note.category)
Index(
    "ix_notes_user_pinned_created",
    Note.user_id,
    Note.is_pinned.desc(),
    Note.created_at.desc(),
)
