"""
Persistence Bridge.

Glue between the NoteManager and whatever stores notes. The bridge hands
snapshots to the collaborator and never waits on an acknowledgement: a
failed save or export is logged and reported as False, nothing more.

Also rebuilds notes from persisted snapshots at startup, substituting
factory defaults for damaged fields so one bad entry cannot block the
rest.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from noteboard.engine.core.logging import get_logger, log_with_source
from noteboard.engine.models.note import Note, note_from_snapshot
from noteboard.engine.repositories.note import NoteManager

logger = get_logger(__name__)


class PersistenceCollaborator(Protocol):
    """Durable storage for note snapshots."""

    async def save(self, snapshots: list[dict[str, Any]]) -> None:
        """Store the current board, replacing what was stored before."""
        ...

    async def export_all(self, snapshots: list[dict[str, Any]]) -> None:
        """Produce a user-facing export of the board."""
        ...


def load_snapshots(snapshots: Iterable[Any]) -> list[Note]:
    """
    Rebuild notes from persisted snapshots.

    Entries that are not mappings are skipped. Mapping entries always
    produce a note; fields that fail validation get factory defaults.

    Args:
        snapshots: Sequence read back from storage (may be empty)

    Returns:
        Reconstructed notes, in input order
    """
    notes: list[Note] = []
    skipped = 0
    for index, raw in enumerate(snapshots):
        if not isinstance(raw, Mapping):
            skipped += 1
            logger.warning(
                "Skipping snapshot that is not an object",
                extra={"index": index, "value_type": type(raw).__name__},
            )
            continue
        notes.append(note_from_snapshot(raw))

    logger.info(
        "Snapshots loaded",
        extra={"loaded": len(notes), "skipped": skipped},
    )
    return notes


class PersistenceBridge:
    """
    Saves and exports the manager's contents through a collaborator.

    Usage:
        bridge = PersistenceBridge(manager, JsonFileStore.from_config())
        await bridge.save_now()
        await bridge.export_all()
    """

    def __init__(self, manager: NoteManager, store: PersistenceCollaborator) -> None:
        self._manager = manager
        self._store = store

    @property
    def store(self) -> PersistenceCollaborator:
        return self._store

    async def save_now(self) -> bool:
        """
        Hand the current snapshot to the store's save().

        Returns:
            True if the store accepted it, False if it raised
        """
        snapshots = self._manager.snapshot()
        try:
            await self._store.save(snapshots)
        except Exception as e:
            log_with_source(
                logger, "storage", "error", "Save failed",
                notes=len(snapshots), error=str(e),
            )
            return False
        logger.debug("Notes saved", extra={"notes": len(snapshots)})
        return True

    async def export_all(self) -> bool:
        """
        Hand the current snapshot to the store's export_all().

        Returns:
            True if the export was written, False if the store raised
        """
        snapshots = self._manager.snapshot()
        try:
            await self._store.export_all(snapshots)
        except Exception as e:
            log_with_source(
                logger, "storage", "error", "Export failed",
                notes=len(snapshots), error=str(e),
            )
            return False
        logger.info("Notes exported", extra={"notes": len(snapshots)})
        return True
