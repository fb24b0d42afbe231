"""
Unit Test Fixtures.

Fixtures for unit tests - all collaborators are doubles.
Unit tests should be fast and isolated, never touching the network.
"""

from typing import Any

import pytest

from noteboard.engine.core.exceptions import PersistenceError, RetrievalError
from noteboard.engine.repositories.note import NoteManager
from noteboard.engine.schemas.quote import Quote
from noteboard.engine.services.interaction import Rect


# =============================================================================
# Presentation Doubles
# =============================================================================


class FakeGeometry:
    """
    Board measured at (100, 50) with size 1000x800; notes render 200x150.

    Note rectangles follow the note's current position, like a real
    presentation that re-renders on every move.
    """

    def __init__(
        self,
        manager: NoteManager,
        board: Rect = Rect(100, 50, 1000, 800),
        note_size: tuple[float, float] = (200, 150),
        measured: bool = True,
    ) -> None:
        self.manager = manager
        self.board = board
        self.note_size = note_size
        self.measured = measured

    def board_rect(self) -> Rect:
        return self.board

    def note_rect(self, note_id: str) -> Rect | None:
        note = self.manager.get(note_id)
        if note is None or not self.measured:
            return None
        width, height = self.note_size
        return Rect(self.board.left + note.x, self.board.top + note.y, width, height)


@pytest.fixture
def geometry(manager: NoteManager) -> FakeGeometry:
    """Measured board geometry bound to the shared manager."""
    return FakeGeometry(manager)


@pytest.fixture
def make_geometry(manager: NoteManager):
    """
    Factory for geometries with a custom board or note size.

    Usage:
        def test_small_board(make_geometry):
            geometry = make_geometry(board=Rect(0, 0, 150, 100))
    """
    def _make(**kwargs: Any) -> FakeGeometry:
        return FakeGeometry(manager, **kwargs)

    return _make


# =============================================================================
# Collaborator Doubles
# =============================================================================


class StubRetriever:
    """Returns a fixed quote and counts calls."""

    def __init__(self, text: str = "Stay focused", attribution: str = "Anon") -> None:
        self.quote = Quote(text=text, attribution=attribution)
        self.calls = 0

    async def fetch(self) -> Quote:
        self.calls += 1
        return self.quote


class FailingRetriever:
    """Raises the configured error on every fetch."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RetrievalError("Quote service returned 503")
        self.calls = 0

    async def fetch(self) -> Quote:
        self.calls += 1
        raise self.error


class RecordingStore:
    """Persistence collaborator that keeps what it was given."""

    def __init__(self) -> None:
        self.saved: list[list[dict[str, Any]]] = []
        self.exported: list[list[dict[str, Any]]] = []

    async def save(self, snapshots: list[dict[str, Any]]) -> None:
        self.saved.append(snapshots)

    async def export_all(self, snapshots: list[dict[str, Any]]) -> None:
        self.exported.append(snapshots)


class FailingStore:
    """Persistence collaborator whose every call fails."""

    def __init__(self) -> None:
        self.calls = 0

    async def save(self, snapshots: list[dict[str, Any]]) -> None:
        self.calls += 1
        raise PersistenceError("disk full")

    async def export_all(self, snapshots: list[dict[str, Any]]) -> None:
        self.calls += 1
        raise OSError("read-only file system")


@pytest.fixture
def retriever() -> StubRetriever:
    return StubRetriever()


@pytest.fixture
def failing_retriever() -> FailingRetriever:
    return FailingRetriever()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
