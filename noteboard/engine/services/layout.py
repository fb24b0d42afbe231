"""
Layout/Sort Engine.

Orders the board by creation time and lays every note out in a single
row. Sorting throws away whatever positions the user had dragged notes
to; that is the intended behaviour and it cannot be undone.
"""

from noteboard.engine.core.config import get_app_config
from noteboard.engine.core.config_schema import LayoutSchema
from noteboard.engine.events.bus import EventBus
from noteboard.engine.events.schemas import BoardRebuilt
from noteboard.engine.models.note import Note
from noteboard.engine.repositories.note import NoteManager
from noteboard.engine.services.base import BaseService


class LayoutEngine(BaseService):
    """Sort-and-relayout over the board's NoteManager."""

    def __init__(
        self,
        manager: NoteManager,
        bus: EventBus | None = None,
        layout: LayoutSchema | None = None,
    ) -> None:
        super().__init__(manager, bus)
        self._layout = layout or get_app_config().board.layout

    def slot(self, index: int) -> tuple[float, float]:
        """Board position of the index-th note in the row."""
        layout = self._layout
        return layout.margin_left + index * (layout.note_width + layout.gap), layout.margin_top

    def sort_and_relayout(self, ascending: bool = True) -> list[Note]:
        """
        Sort notes by creation time and place them left to right.

        Notes with a missing or unparsable timestamp sort as the epoch.
        Ties keep the order the manager returned them in.

        Args:
            ascending: Oldest first when True, newest first otherwise

        Returns:
            Notes in their new order
        """
        notes = sorted(
            self.manager.all(),
            key=lambda note: note.created_at,
            reverse=not ascending,
        )

        self.manager.clear()
        for note in notes:
            self.manager.add(note)

        for index, note in enumerate(notes):
            note.update_position(*self.slot(index))

        self._publish(
            BoardRebuilt(
                payload={
                    "reason": "sort",
                    "ascending": ascending,
                    "notes": [note.serialize() for note in notes],
                }
            )
        )
        self._log_operation("Board sorted", ascending=ascending, count=len(notes))
        return notes
