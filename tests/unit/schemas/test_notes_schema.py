"""
Unit tests for note and sharing schemas.
"""

import pytest
from pydantic import ValidationError

from notegate.core.models import Visibility
from notegate.core.schemas.notes import NoteCreate, NoteUpdate
from notegate.core.schemas.sharing import ShareCreateRequest


class TestNoteSchemas:
    def test_note_create_tags_normalized(self):
        note = NoteCreate(title="Valid Note", tags=["Work", " project ", "work"])
        assert note.tags == ["work", "project"]

    def test_note_create_defaults(self):
        note = NoteCreate(title="  Padded  ")
        assert note.title == "Padded"
        assert note.content == ""
        assert note.tags == []
        assert note.visibility is Visibility.PRIVATE

    def test_note_create_blank_title_error(self):
        with pytest.raises(ValidationError, match="Title cannot be empty"):
            NoteCreate(title="   ")

    def test_note_create_comma_in_tag_error(self):
        with pytest.raises(ValidationError, match="Tags cannot contain commas"):
            NoteCreate(title="Bad Tag", tags=["a,b"])

    def test_note_create_too_many_tags(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="Many", tags=[f"t{i}" for i in range(21)])

    def test_note_create_unknown_visibility(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="N", visibility="friends")

    def test_note_update_tracks_only_sent_fields(self):
        update = NoteUpdate(content="new")
        assert update.model_dump(exclude_unset=True) == {"content": "new"}

    def test_note_update_parses_visibility(self):
        assert NoteUpdate(visibility="public").visibility is Visibility.PUBLIC


class TestShareSchemas:
    def test_share_defaults_to_read(self):
        request = ShareCreateRequest(email="bob@example.com")
        assert request.permission.value == "read"

    def test_share_rejects_unknown_permission(self):
        with pytest.raises(ValidationError):
            ShareCreateRequest(email="bob@example.com", permission="admin")

    def test_share_requires_valid_email(self):
        with pytest.raises(ValidationError):
            ShareCreateRequest(email="not-an-email")
