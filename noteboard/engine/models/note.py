"""
Note Model.

The note entity: identity, text, board position, palette colour, creation
time and an optional attached image. The entity imposes no bounds on its
position; drag clamping belongs to the interaction controller.

A note may be attached to an EventBus. While attached, every mutation is
published so the presentation collaborator can follow it. Detaching drops
the note's subscriptions; a detached note keeps working as a plain object.
"""

import math
import random
import secrets
import time
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from noteboard.engine.core.exceptions import RetrievalError, ValidationError
from noteboard.engine.core.logging import get_logger
from noteboard.engine.core.utils import parse_timestamp, utc_now_iso
from noteboard.engine.events.schemas import (
    BoardEvent,
    NoteContentUpdated,
    NoteImageSet,
    NoteMoved,
    NoteRecolored,
)
from noteboard.engine.schemas.note import NoteSnapshot

if TYPE_CHECKING:
    from noteboard.engine.events.bus import EventBus
    from noteboard.engine.services.quotes import TextRetriever

logger = get_logger(__name__)

NOTE_COLORS = ("note-yellow", "note-blue", "note-green", "note-pink")

_NOTE_FIELDS = ("id", "content", "x", "y", "color", "timestamp", "image")


def generate_note_id() -> str:
    """Build a fresh identifier: note_<epoch-ms>_<random hex>."""
    return f"note_{time.time_ns() // 1_000_000}_{secrets.token_hex(4)}"


def random_color() -> str:
    return random.choice(NOTE_COLORS)


def _coordinate(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class Note:
    """
    A single note on the board.

    The id and timestamp are fixed at construction. Position is always a
    finite pair and both coordinates change together.
    """

    def __init__(
        self,
        id: str | None = None,
        content: str | None = "",
        x: float = 0.0,
        y: float = 0.0,
        color: str | None = None,
        timestamp: str | None = None,
        image: str | None = None,
    ) -> None:
        self._id = id or generate_note_id()
        self._timestamp = timestamp or utc_now_iso()
        self._content = "" if content is None else str(content)
        self._x = _coordinate(x)
        self._y = _coordinate(y)
        self._color = color if color in NOTE_COLORS else random_color()
        self._image = image or None
        self._bus: "EventBus | None" = None

    def __repr__(self) -> str:
        return f"<Note(id={self._id}, x={self._x}, y={self._y}, color={self._color!r})>"

    @property
    def id(self) -> str:
        return self._id

    @property
    def timestamp(self) -> str:
        return self._timestamp

    @property
    def created_at(self) -> datetime:
        """Creation time as a datetime; unparsable timestamps read as the epoch."""
        return parse_timestamp(self._timestamp)

    @property
    def content(self) -> str:
        return self._content

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def position(self) -> tuple[float, float]:
        return self._x, self._y

    @property
    def color(self) -> str:
        return self._color

    @property
    def image(self) -> str | None:
        return self._image

    # -------------------------------------------------------------------------
    # Presentation binding
    # -------------------------------------------------------------------------

    @property
    def is_attached(self) -> bool:
        return self._bus is not None

    def attach(self, bus: "EventBus") -> None:
        """Start publishing this note's changes on the bus."""
        self._bus = bus

    def detach(self) -> None:
        """Stop publishing and release every subscription scoped to this note."""
        if self._bus is not None:
            self._bus.unsubscribe_note(self._id)
            self._bus = None

    def _notify(self, event: BoardEvent) -> None:
        if self._bus is not None:
            self._bus.publish(event)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def update_position(self, x: float, y: float) -> None:
        """
        Move the note.

        Args:
            x: New board-space x coordinate
            y: New board-space y coordinate

        Raises:
            ValidationError: If either coordinate is NaN or infinite
        """
        new_x, new_y = float(x), float(y)
        if not (math.isfinite(new_x) and math.isfinite(new_y)):
            raise ValidationError(
                "Note position must be finite",
                details={"note_id": self._id, "x": str(x), "y": str(y)},
            )
        self._x, self._y = new_x, new_y
        self._notify(NoteMoved(note_id=self._id, payload={"x": new_x, "y": new_y}))

    def update_content(self, content: str) -> None:
        self._content = content
        self._notify(NoteContentUpdated(note_id=self._id, payload={"content": content}))

    def set_image(self, image: str) -> None:
        """Attach an image, replacing any previous one."""
        self._image = image
        self._notify(NoteImageSet(note_id=self._id, payload={"image": image}))

    def set_color(self, color: str) -> None:
        if color not in NOTE_COLORS:
            raise ValidationError(
                f"Unknown note color: {color}",
                details={"allowed": list(NOTE_COLORS)},
            )
        self._color = color
        self._notify(NoteRecolored(note_id=self._id, payload={"color": color}))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def serialize(self) -> dict[str, Any]:
        """Plain snapshot of every attribute, for storage and export."""
        return {
            "id": self._id,
            "content": self._content,
            "x": self._x,
            "y": self._y,
            "color": self._color,
            "timestamp": self._timestamp,
            "image": self._image,
        }

    def format_timestamp(self) -> str:
        """Creation time in local time, for display under the note."""
        return self.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")

    # -------------------------------------------------------------------------
    # Augmentation
    # -------------------------------------------------------------------------

    async def fetch_augmentation(self, retriever: "TextRetriever") -> str:
        """
        Fetch a quote and append it to the note.

        The quote goes after a blank line, or replaces the content when the
        note is empty. Content is read when the quote arrives; a manual edit
        applied after that replaces the quote (last writer wins).

        Args:
            retriever: Text-retrieval collaborator

        Returns:
            The formatted quote that was added

        Raises:
            RetrievalError: If the fetch failed; content is left untouched
        """
        try:
            quote = await retriever.fetch()
        except RetrievalError as e:
            logger.error("Error fetching quote", extra={"note_id": self._id, "error": str(e)})
            raise
        except Exception as e:
            logger.error("Error fetching quote", extra={"note_id": self._id, "error": str(e)})
            raise RetrievalError(f"Failed to fetch quote: {e}") from e

        text = quote.formatted()
        self.update_content(f"{self._content}\n\n{text}" if self._content else text)
        return text


def create_note(options: Mapping[str, Any] | None = None, **overrides: Any) -> Note:
    """
    Factory for new notes.

    Any subset of id, content, x, y, color, timestamp and image may be
    supplied; the rest get defaults. Unknown keys are ignored.

    Usage:
        note = create_note(x=120, y=80)
        copy = create_note(note.serialize())
    """
    fields = {**(options or {}), **overrides}
    return Note(**{key: fields[key] for key in _NOTE_FIELDS if key in fields})


def note_from_snapshot(raw: Mapping[str, Any]) -> Note:
    """
    Rebuild a note from persisted data, substituting defaults for bad fields.

    Raises:
        TypeError: If raw is not a mapping at all
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"Snapshot must be a mapping, got {type(raw).__name__}")
    snapshot = NoteSnapshot.model_validate(dict(raw))
    return create_note(snapshot.provided())
