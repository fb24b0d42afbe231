"""
Base Service.

Base class for board services. Services share the board's NoteManager and
EventBus, mutate notes, and publish what changed for the presentation.

Usage:
    from noteboard.engine.services.base import BaseService

    class LayoutEngine(BaseService):
        def sort_and_relayout(self, ascending: bool = True) -> list[Note]:
            notes = self.manager.all()
            ...
            self._publish(BoardRebuilt(payload={...}))
"""

from typing import Any

from noteboard.engine.core.logging import get_logger
from noteboard.engine.events.bus import EventBus
from noteboard.engine.events.schemas import BoardEvent, NoteCreated
from noteboard.engine.models.note import Note
from noteboard.engine.repositories.note import NoteManager


class BaseService:
    """
    Base class for all board services.

    Provides:
    - Shared note registry and event bus
    - Logging context

    Subclasses should call super().__init__(manager, bus) in their __init__.
    """

    def __init__(self, manager: NoteManager, bus: EventBus | None = None) -> None:
        """
        Initialize the service.

        Args:
            manager: Registry of live notes
            bus: Event bus shared with the presentation; a private one is
                created when omitted
        """
        self._manager = manager
        self._bus = bus if bus is not None else EventBus()
        self._logger = get_logger(self.__class__.__module__)

    @property
    def manager(self) -> NoteManager:
        """Get the note registry."""
        return self._manager

    @property
    def bus(self) -> EventBus:
        """Get the event bus."""
        return self._bus

    def _publish(self, event: BoardEvent) -> None:
        self._bus.publish(event)

    def _register(self, note: Note, focus: bool = False) -> None:
        """Add a note to the manager, bind it to the bus and announce it."""
        self._manager.add(note)
        note.attach(self._bus)
        self._publish(
            NoteCreated(note_id=note.id, payload={"note": note.serialize(), "focus": focus})
        )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
