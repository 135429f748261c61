"""
Unit Tests for Note Schemas.
"""

import pytest
from pydantic import ValidationError

from keepnotes.backend.models.note import NoteCategory
from keepnotes.backend.schemas.note import NoteCreate, NoteUpdate


class TestNoteCreate:
    """Tests for NoteCreate validation and cleanup."""

    def test_defaults(self):
        note = NoteCreate(title="Groceries", content="Milk")

        assert note.category == NoteCategory.PERSONAL
        assert note.tags == []
        assert note.color == "#ffffff"

    def test_title_and_content_trimmed(self):
        note = NoteCreate(title="  Groceries ", content="\nMilk\n")

        assert note.title == "Groceries"
        assert note.content == "Milk"

    def test_whitespace_title_rejected(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="   ", content="Milk")

    def test_tags_trimmed_and_empty_dropped(self):
        note = NoteCreate(title="t", content="c", tags=[" food ", "", "  ", "home"])

        assert note.tags == ["food", "home"]

    def test_too_many_tags(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="t", content="c", tags=[f"t{i}" for i in range(11)])

    def test_long_tag(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="t", content="c", tags=["x" * 31])

    @pytest.mark.parametrize("color", ["#fff", "#A1b2C3"])
    def test_valid_colors(self, color):
        assert NoteCreate(title="t", content="c", color=color).color == color

    @pytest.mark.parametrize("color", ["fff", "#ffff", "#gggggg", "red"])
    def test_invalid_colors(self, color):
        with pytest.raises(ValidationError):
            NoteCreate(title="t", content="c", color=color)

    def test_camel_case_input(self):
        note = NoteCreate.model_validate({"title": "t", "content": "c", "category": "work"})

        assert note.category == NoteCategory.WORK


class TestNoteUpdate:
    """Only supplied, non-null fields become changes."""

    def test_nothing_supplied(self):
        assert NoteUpdate().changes() == {}

    def test_nulls_ignored(self):
        update = NoteUpdate.model_validate({"title": None, "isPinned": True})

        assert update.changes() == {"is_pinned": True}

    def test_false_flags_kept(self):
        update = NoteUpdate.model_validate({"isArchived": False})

        assert update.changes() == {"is_archived": False}

    def test_empty_tag_list_kept(self):
        assert NoteUpdate(tags=[" "]).changes() == {"tags": []}
