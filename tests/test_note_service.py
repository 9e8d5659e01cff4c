"""
StudyNotes — Note Service Unit Tests
=====================================

What:  Tests for the persistence gateway (list, get, create, update, delete, search).
How:   Error paths use mock DB sessions; data paths run against an in-memory
       SQLite database.

What we test:
    ✅ Missing note raises NotFoundError (get, update, delete)
    ✅ Unexpected driver errors are wrapped in DatabaseError
    ✅ create → get round trip keeps title and blocks
    ✅ update merges only provided fields and refreshes updated_at
    ✅ list order is most-recently-updated first
    ✅ search is case-insensitive over title and block content
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from studynotes.exceptions import DatabaseError, NotFoundError
from studynotes.schemas.note import NoteCreate, NoteUpdate
from studynotes.services.note_service import NoteService


class TestNoteServiceErrors:
    """Error translation with a mocked session."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_missing_note_raises_not_found(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_note(mock_db_session, 42)
        assert "42" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_delete_missing_note_raises_not_found(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_db_session, 7)
        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_note_raises_not_found(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=result)

        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, 7, NoteUpdate(title="x"))
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_driver_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("connection reset"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_notes(mock_db_session)
        assert "connection reset" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_create_flush_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=RuntimeError("disk full"))

        with pytest.raises(DatabaseError):
            await self.service.create_note(mock_db_session, NoteCreate(title="A"))
        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_search_driver_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("timeout"))

        with pytest.raises(DatabaseError):
            await self.service.search_notes(mock_db_session, "hello")


class TestNoteServicePersistence:
    """Behaviour against a real (in-memory SQLite) database."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, db_session, make_block):
        b1 = make_block("b1", "checkbox-list", "Buy milk", {"checked": True})
        created = await self.service.create_note(db_session, NoteCreate(title="A", blocks=[b1]))

        fetched = await self.service.get_note(db_session, created.id)
        assert fetched.title == "A"
        assert fetched.blocks == [b1]
        assert fetched.created_at == fetched.updated_at

    @pytest.mark.asyncio
    async def test_create_defaults_to_untitled_and_empty(self, db_session):
        created = await self.service.create_note(db_session, NoteCreate())
        assert created.title == "Untitled"
        assert created.blocks == []

    @pytest.mark.asyncio
    async def test_update_merges_provided_fields_only(self, db_session, make_block):
        original = [make_block("b1", content="first")]
        created = await self.service.create_note(
            db_session, NoteCreate(title="Keep me", blocks=original)
        )
        await asyncio.sleep(0.01)

        updated = await self.service.update_note(
            db_session, created.id, NoteUpdate(blocks=[make_block("b2", "code", "x = 1")])
        )
        assert updated.title == "Keep me"
        assert [b.id for b in updated.blocks] == ["b2"]
        assert updated.updated_at > created.updated_at

        retitled = await self.service.update_note(db_session, created.id, NoteUpdate(title="New"))
        assert retitled.title == "New"
        assert [b.id for b in retitled.blocks] == ["b2"]

    @pytest.mark.asyncio
    async def test_delete_removes_note(self, db_session):
        created = await self.service.create_note(db_session, NoteCreate(title="Gone"))
        await self.service.delete_note(db_session, created.id)

        with pytest.raises(NotFoundError):
            await self.service.get_note(db_session, created.id)

    @pytest.mark.asyncio
    async def test_list_orders_most_recently_updated_first(self, db_session):
        first = await self.service.create_note(db_session, NoteCreate(title="first"))
        await asyncio.sleep(0.01)
        second = await self.service.create_note(db_session, NoteCreate(title="second"))
        await asyncio.sleep(0.01)

        assert [n.id for n in await self.service.list_notes(db_session)] == [second.id, first.id]

        await self.service.update_note(db_session, first.id, NoteUpdate(title="first, edited"))
        assert [n.id for n in await self.service.list_notes(db_session)] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_on_title(self, db_session):
        match = await self.service.create_note(db_session, NoteCreate(title="Say HELLO there"))
        await self.service.create_note(db_session, NoteCreate(title="Goodbye"))

        results = await self.service.search_notes(db_session, "hello")
        assert [n.id for n in results] == [match.id]

    @pytest.mark.asyncio
    async def test_search_matches_block_content(self, db_session, make_block):
        match = await self.service.create_note(
            db_session,
            NoteCreate(title="Biology", blocks=[make_block("b1", content="Mitochondria")]),
        )
        await self.service.create_note(db_session, NoteCreate(title="Chemistry"))

        results = await self.service.search_notes(db_session, "mitochondria")
        assert [n.id for n in results] == [match.id]

    @pytest.mark.asyncio
    async def test_search_does_not_match_block_ids_or_types(self, db_session, make_block):
        await self.service.create_note(
            db_session,
            NoteCreate(title="Lists", blocks=[make_block("bullet-1", "bullet-list", "eggs")]),
        )
        assert await self.service.search_notes(db_session, "bullet") == []
