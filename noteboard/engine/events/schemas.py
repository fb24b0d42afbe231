"""
Event Schemas.

Standardized event envelope and board event types exchanged between the
engine and its presentation collaborator over the in-process EventBus.

Naming convention for event_type: domain.entity.action (dot notation)

Usage:
    from noteboard.engine.events.schemas import NoteMoved

    event = NoteMoved(note_id=note.id, payload={"x": 20.0, "y": 20.0})
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from noteboard.engine.core.utils import utc_now_iso


class BoardEvent(BaseModel):
    """Base event envelope — all board events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Event type in dot notation (e.g. board.note.moved)
        timestamp: ISO 8601 UTC timestamp
        source: Component that published the event
        note_id: Note the event concerns, None for board-wide events
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    timestamp: str = Field(default_factory=utc_now_iso)
    source: str = "board"
    note_id: str | None = None
    payload: dict = Field(default_factory=dict)


class NoteCreated(BoardEvent):
    """Published when a note is registered and needs a presentation."""

    event_type: str = "board.note.created"


class NoteMoved(BoardEvent):
    """Published on every position change."""

    event_type: str = "board.note.moved"


class NoteContentUpdated(BoardEvent):
    """Published when a note's text changes."""

    event_type: str = "board.note.content_updated"


class NoteImageSet(BoardEvent):
    """Published when an image is attached or replaced."""

    event_type: str = "board.note.image_set"


class NoteRecolored(BoardEvent):
    """Published when a note switches palette entry."""

    event_type: str = "board.note.recolored"


class NoteActivated(BoardEvent):
    """Published when a drag starts; the presentation raises the note."""

    event_type: str = "board.note.activated"


class NoteReleased(BoardEvent):
    """Published when a drag ends."""

    event_type: str = "board.note.released"


class NoteDeleted(BoardEvent):
    """Published after a note is removed from the manager."""

    event_type: str = "board.note.deleted"


class AugmentationFailed(BoardEvent):
    """Published when a quote fetch fails; payload carries the indicator delay."""

    event_type: str = "board.note.augmentation_failed"


class BoardRebuilt(BoardEvent):
    """Published when the whole board must be re-rendered in a given order."""

    event_type: str = "board.layout.rebuilt"
