"""
Note Manager.

In-memory registry of the board's live notes, keyed by note id.
Iteration order follows insertion but carries no meaning; the only
ordering the board promises is the one produced by a sort.
"""

from collections.abc import Iterator
from typing import Any

from noteboard.engine.core.logging import get_logger
from noteboard.engine.models.note import Note

logger = get_logger(__name__)


class NoteManager:
    """
    Registry of notes by id.

    Adding a note whose id is already present replaces the old entry.
    Lookups and removals of absent ids report not-found instead of raising.
    """

    def __init__(self) -> None:
        self._notes: dict[str, Note] = {}

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def __iter__(self) -> Iterator[Note]:
        return iter(self.all())

    def add(self, note: Note) -> None:
        """Register a note, replacing any entry with the same id."""
        if note.id in self._notes and self._notes[note.id] is not note:
            logger.debug("Replacing note with duplicate id", extra={"note_id": note.id})
        self._notes[note.id] = note

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def remove(self, note_id: str) -> bool:
        """
        Remove a note by id.

        Returns:
            True if a note was removed, False if the id was not registered
        """
        if self._notes.pop(note_id, None) is None:
            logger.debug("Note not found for removal", extra={"note_id": note_id})
            return False
        return True

    def all(self) -> list[Note]:
        """Every live note, materialized at call time."""
        return list(self._notes.values())

    def clear(self) -> None:
        """Empty the registry. Notes themselves are not detached."""
        self._notes.clear()

    def snapshot(self) -> list[dict[str, Any]]:
        """Serialized form of every note, in all() order."""
        return [note.serialize() for note in self.all()]
