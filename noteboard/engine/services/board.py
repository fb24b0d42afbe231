"""
Board Service.

Entry point the presentation talks to. Owns the NoteManager and EventBus
and routes presentation requests (edit, delete, attach image, fetch quote,
sort, export) to the engine components. Drag and creation go through the
BoardInteractionController it exposes as `interaction`.

Usage:
    board = BoardService(store=JsonFileStore.from_config(), geometry=geometry)
    board.restore(board_store.load())
    board.start()                       # autosave every 5 seconds

    board.interaction.double_activate(x, y)
    board.edit_content(note_id, "buy milk")
    await board.augment(note_id)
    board.sort(ascending=False)
    await board.export()
"""

from collections.abc import Iterable
from typing import Any

from noteboard.engine.core.config import get_app_config
from noteboard.engine.core.exceptions import RetrievalError
from noteboard.engine.events.bus import EventBus
from noteboard.engine.events.schemas import AugmentationFailed, BoardRebuilt, NoteDeleted
from noteboard.engine.models.note import Note
from noteboard.engine.repositories.note import NoteManager
from noteboard.engine.services.base import BaseService
from noteboard.engine.services.interaction import BoardGeometry, BoardInteractionController
from noteboard.engine.services.layout import LayoutEngine
from noteboard.engine.services.persistence import (
    PersistenceBridge,
    PersistenceCollaborator,
    load_snapshots,
)
from noteboard.engine.services.quotes import QuoteClient, TextRetriever
from noteboard.engine.tasks.autosave import AutosaveTask


class BoardService(BaseService):
    """
    Service for board-level operations.

    Lookups of absent notes return False/None; nothing here raises for a
    missing note.
    """

    def __init__(
        self,
        manager: NoteManager | None = None,
        bus: EventBus | None = None,
        store: PersistenceCollaborator | None = None,
        retriever: TextRetriever | None = None,
        geometry: BoardGeometry | None = None,
        layout: LayoutEngine | None = None,
    ) -> None:
        super().__init__(manager if manager is not None else NoteManager(), bus)
        self._retriever = retriever
        self._quote_client: QuoteClient | None = None
        self._layout = layout or LayoutEngine(self.manager, self.bus)
        self._interaction = (
            BoardInteractionController(self.manager, geometry, self.bus)
            if geometry is not None else None
        )
        self._bridge = PersistenceBridge(self.manager, store) if store is not None else None
        self._autosave = AutosaveTask(self._bridge) if self._bridge is not None else None

    @property
    def interaction(self) -> BoardInteractionController:
        if self._interaction is None:
            raise RuntimeError("Board has no geometry; pointer interaction is unavailable")
        return self._interaction

    @property
    def autosave(self) -> AutosaveTask | None:
        return self._autosave

    def _bridge_or_fail(self) -> PersistenceBridge:
        if self._bridge is None:
            raise RuntimeError("Board has no persistence store")
        return self._bridge

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def restore(self, snapshots: Iterable[Any]) -> list[Note]:
        """Rebuild the board from persisted snapshots and render it."""
        notes = load_snapshots(snapshots)
        for note in notes:
            self._register(note)
        self.render_all(reason="restore")
        self._log_operation("Board restored", notes=len(self.manager))
        return notes

    def render_all(self, reason: str = "render") -> None:
        """Ask the presentation to rebuild every note."""
        self._publish(BoardRebuilt(payload={"reason": reason, "notes": self.manager.snapshot()}))

    def start(self) -> None:
        """Start autosave. Must be called from inside the running event loop."""
        if self._autosave is not None:
            self._autosave.start()

    async def stop(self) -> None:
        """
        Stop autosave and flush one last save.

        A quote client the board opened itself is closed; an injected
        retriever belongs to the caller.
        """
        if self._autosave is not None:
            await self._autosave.stop()
            await self._bridge_or_fail().save_now()
        if self._quote_client is not None:
            await self._quote_client.close()

    # -------------------------------------------------------------------------
    # Presentation requests
    # -------------------------------------------------------------------------

    def edit_content(self, note_id: str, content: str) -> bool:
        note = self.manager.get(note_id)
        if note is None:
            return False
        note.update_content(content)
        return True

    def attach_image(self, note_id: str, image: str) -> bool:
        note = self.manager.get(note_id)
        if note is None:
            return False
        note.set_image(image)
        self._log_debug("Image attached", note_id=note_id, size=len(image))
        return True

    def recolor(self, note_id: str, color: str) -> bool:
        note = self.manager.get(note_id)
        if note is None:
            return False
        note.set_color(color)
        return True

    def delete_note(self, note_id: str) -> bool:
        """
        Remove a note and release its bindings.

        The deletion event goes out before the bindings are dropped so the
        note's own subscribers can animate it away.
        """
        note = self.manager.get(note_id)
        if note is None or not self.manager.remove(note_id):
            self._log_debug("Delete requested for unknown note", note_id=note_id)
            return False
        self._publish(NoteDeleted(note_id=note_id))
        note.detach()
        self._log_operation("Note deleted", note_id=note_id)
        return True

    async def augment(self, note_id: str) -> str | None:
        """
        Append a fetched quote to a note.

        Returns:
            The appended quote, or None if the note does not exist

        Raises:
            RetrievalError: If the fetch failed; the note is unchanged
        """
        note = self.manager.get(note_id)
        if note is None:
            return None

        if self._retriever is None:
            self._quote_client = QuoteClient()
            self._retriever = self._quote_client

        try:
            return await note.fetch_augmentation(self._retriever)
        except RetrievalError as e:
            self._publish(
                AugmentationFailed(
                    note_id=note_id,
                    payload={
                        "error": e.message,
                        "recover_after_seconds": get_app_config().board.indicators.error_recovery_seconds,
                    },
                )
            )
            raise

    def sort(self, ascending: bool = True) -> list[Note]:
        return self._layout.sort_and_relayout(ascending)

    async def save(self) -> bool:
        return await self._bridge_or_fail().save_now()

    async def export(self) -> bool:
        return await self._bridge_or_fail().export_all()
