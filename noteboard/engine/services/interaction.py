"""
Board Interaction Controller.

Turns raw pointer events from the presentation into note movements on a
bounded board. Drag is a two-state machine:

    IDLE --press on note body--> DRAGGING
    DRAGGING --move--> DRAGGING   (clamped position applied on every move)
    DRAGGING --release--> IDLE    (wherever the pointer is)

Pointer coordinates are screen coordinates. Board and note rectangles are
measured at runtime by a BoardGeometry supplied by the presentation; the
engine does not model them.

Usage:
    controller = BoardInteractionController(manager, geometry, bus)
    controller.press(note.id, HitRegion.BODY, 310, 220)
    controller.move(400, 260)
    controller.release()
    controller.double_activate(500, 500)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from noteboard.engine.core.config import get_app_config
from noteboard.engine.events.bus import EventBus
from noteboard.engine.events.schemas import NoteActivated, NoteReleased
from noteboard.engine.models.note import Note, create_note
from noteboard.engine.repositories.note import NoteManager
from noteboard.engine.services.base import BaseService


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class HitRegion(str, Enum):
    """Part of a note that received a pointer press."""

    BODY = "body"
    CONTENT = "content"
    DELETE_BUTTON = "delete_button"
    QUOTE_BUTTON = "quote_button"
    IMAGE_BUTTON = "image_button"


@dataclass(frozen=True)
class Rect:
    """Screen-space rectangle."""

    left: float
    top: float
    width: float
    height: float


class BoardGeometry(Protocol):
    """Runtime measurements provided by the presentation."""

    def board_rect(self) -> Rect:
        """Visible board rectangle in screen coordinates."""
        ...

    def note_rect(self, note_id: str) -> Rect | None:
        """Rendered note rectangle, or None if the note is not measured."""
        ...


def clamp(value: float, upper: float) -> float:
    """Clamp to [0, upper]; an upper bound below zero pins to 0."""
    return max(0.0, min(value, upper))


class BoardInteractionController(BaseService):
    """
    Drag state machine and note creation on double activation.

    Only one drag is tracked at a time. The pointer offset inside the note
    is captured on press and held until release so the note does not jump.
    """

    def __init__(
        self,
        manager: NoteManager,
        geometry: BoardGeometry,
        bus: EventBus | None = None,
        default_extent: tuple[float, float] | None = None,
    ) -> None:
        super().__init__(manager, bus)
        self._geometry = geometry
        if default_extent is None:
            extent = get_app_config().board.default_note_extent
            default_extent = (extent.width, extent.height)
        self._default_extent = default_extent
        self._state = DragState.IDLE
        self._note_id: str | None = None
        self._offset: tuple[float, float] = (0.0, 0.0)

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def dragging_note_id(self) -> str | None:
        return self._note_id

    @property
    def drag_offset(self) -> tuple[float, float]:
        return self._offset

    def _measure_note(self, note: Note, board: Rect) -> Rect:
        measured = self._geometry.note_rect(note.id)
        if measured is not None:
            return measured
        width, height = self._default_extent
        return Rect(board.left + note.x, board.top + note.y, width, height)

    def press(self, note_id: str, region: HitRegion | str, pointer_x: float, pointer_y: float) -> bool:
        """
        Handle a pointer press on a note.

        Presses on the content area or any button belong to other
        collaborators and never start a drag. The region may be given as
        its plain string value.

        Returns:
            True if a drag started
        """
        if region != HitRegion.BODY:
            return False

        note = self.manager.get(note_id)
        if note is None:
            self._log_debug("Press on unknown note ignored", note_id=note_id)
            return False

        rect = self._measure_note(note, self._geometry.board_rect())
        self._offset = (pointer_x - rect.left, pointer_y - rect.top)
        self._note_id = note_id
        self._state = DragState.DRAGGING
        self._publish(NoteActivated(note_id=note_id, payload={"offset": list(self._offset)}))
        self._log_debug("Drag started", note_id=note_id, offset=self._offset)
        return True

    def move(self, pointer_x: float, pointer_y: float) -> tuple[float, float] | None:
        """
        Handle a pointer move.

        Returns:
            The clamped position applied to the dragged note, or None when
            no drag is active or the event was unusable
        """
        if self._state is not DragState.DRAGGING or self._note_id is None:
            return None

        if not (math.isfinite(pointer_x) and math.isfinite(pointer_y)):
            self._log_debug("Non-finite pointer position ignored", note_id=self._note_id)
            return None

        note = self.manager.get(self._note_id)
        if note is None:
            self._log_debug("Dragged note disappeared, ending drag", note_id=self._note_id)
            self._reset()
            return None

        board = self._geometry.board_rect()
        rect = self._measure_note(note, board)
        offset_x, offset_y = self._offset

        new_x = clamp(pointer_x - board.left - offset_x, board.width - rect.width)
        new_y = clamp(pointer_y - board.top - offset_y, board.height - rect.height)

        note.update_position(new_x, new_y)
        return new_x, new_y

    def release(self) -> None:
        """End any drag. The note stays where the last move put it."""
        if self._state is DragState.DRAGGING and self._note_id is not None:
            self._publish(NoteReleased(note_id=self._note_id))
            self._log_debug("Drag ended", note_id=self._note_id)
        self._reset()

    def _reset(self) -> None:
        self._state = DragState.IDLE
        self._note_id = None
        self._offset = (0.0, 0.0)

    def double_activate(
        self,
        pointer_x: float,
        pointer_y: float,
        on_note: bool = False,
    ) -> Note | None:
        """
        Create a note where the empty board was double-activated.

        Args:
            pointer_x: Screen x of the activation
            pointer_y: Screen y of the activation
            on_note: True if the activation landed on an existing note

        Returns:
            The new note, or None if the activation was on a note
        """
        if on_note:
            return None

        board = self._geometry.board_rect()
        note = create_note(content="", x=pointer_x - board.left, y=pointer_y - board.top)
        self._register(note, focus=True)
        self._log_operation("Note created", note_id=note.id, x=note.x, y=note.y)
        return note
