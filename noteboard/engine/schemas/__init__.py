"""
Snapshot and payload schemas.

Pydantic models for data that crosses the engine boundary: note snapshots
going to and from storage, and quotes coming from the retrieval service.
"""

from noteboard.engine.schemas.note import NoteSnapshot
from noteboard.engine.schemas.quote import Quote

__all__ = [
    "NoteSnapshot",
    "Quote",
]
