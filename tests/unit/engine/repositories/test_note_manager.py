"""
Unit Tests for the Note Manager.

Tests registration, lookup and removal semantics of the note registry.
"""

from noteboard.engine.models.note import create_note
from noteboard.engine.repositories.note import NoteManager


class TestNoteManager:
    """Tests for NoteManager."""

    def test_add_and_get(self, manager):
        note = create_note(content="hello")
        manager.add(note)

        assert manager.get(note.id) is note
        assert note.id in manager
        assert len(manager) == 1

    def test_get_absent_returns_none(self, manager):
        assert manager.get("note_missing") is None

    def test_duplicate_id_last_wins(self, manager):
        first = create_note(id="note_dup", content="first")
        second = create_note(id="note_dup", content="second")

        manager.add(first)
        manager.add(second)

        assert len(manager) == 1
        assert manager.get("note_dup") is second

    def test_remove(self, manager):
        note = create_note()
        manager.add(note)

        assert manager.remove(note.id) is True
        assert manager.get(note.id) is None
        assert len(manager) == 0

    def test_remove_absent_is_not_an_error(self, manager):
        manager.add(create_note(id="note_kept"))

        assert manager.remove("note_missing") is False
        assert len(manager) == 1

    def test_all_is_a_snapshot(self, manager):
        manager.add(create_note())
        notes = manager.all()
        manager.add(create_note())

        assert len(notes) == 1
        assert len(manager.all()) == 2

    def test_iteration_matches_all(self, manager):
        for _ in range(3):
            manager.add(create_note())
        assert list(manager) == manager.all()

    def test_clear(self, manager):
        manager.add(create_note())
        manager.clear()
        assert len(manager) == 0

    def test_snapshot_serializes_every_note(self, manager):
        notes = [create_note(content=str(i)) for i in range(3)]
        for note in notes:
            manager.add(note)

        assert manager.snapshot() == [note.serialize() for note in notes]

    def test_empty_manager(self):
        manager = NoteManager()
        assert manager.all() == []
        assert manager.snapshot() == []
