"""
JSON File Store.

Default persistence collaborator. Keeps the board in a single JSON file
(an array of note snapshots) and writes exports as separate timestamped
files. File I/O runs in a worker thread so the event loop keeps serving
pointer events while a save is in flight. Writes through one store are
serialized, so overlapping saves land in call order.

Usage:
    store = JsonFileStore.from_config()
    snapshots = store.load()
    await store.save(manager.snapshot())
    path = await store.export_all(manager.snapshot())
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from noteboard.engine.core.config import get_app_config, get_export_dir, get_storage_path
from noteboard.engine.core.exceptions import PersistenceError
from noteboard.engine.core.logging import get_logger
from noteboard.engine.core.utils import utc_now

logger = get_logger(__name__)


class JsonFileStore:
    """Snapshot storage backed by JSON files on disk."""

    def __init__(
        self,
        path: Path,
        export_dir: Path | None = None,
        export_prefix: str = "notes-export",
    ) -> None:
        self.path = Path(path)
        self.export_dir = Path(export_dir) if export_dir is not None else self.path.parent
        self.export_prefix = export_prefix
        self.last_export_path: Path | None = None
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, path: Path | None = None) -> "JsonFileStore":
        """Build a store from persistence.yaml, optionally overriding the file."""
        return cls(
            path=path or get_storage_path(),
            export_dir=get_export_dir(),
            export_prefix=get_app_config().persistence.export_prefix,
        )

    def load(self) -> list[Any]:
        """
        Read the stored snapshots.

        Returns:
            The stored list, or [] if nothing has been saved yet

        Raises:
            PersistenceError: If the file exists but is not a JSON array
        """
        if not self.path.exists():
            logger.info("No saved notes found", extra={"path": str(self.path)})
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise PersistenceError(f"Expected a list of notes in {self.path}")
        return data

    async def save(self, snapshots: list[dict[str, Any]]) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._write, self.path, snapshots)

    async def export_all(self, snapshots: list[dict[str, Any]]) -> Path:
        """Write an export file and return its path."""
        stamp = utc_now().strftime("%Y%m%d-%H%M%S-%f")
        target = self.export_dir / f"{self.export_prefix}-{stamp}.json"
        async with self._write_lock:
            await asyncio.to_thread(self._write, target, snapshots, 2)
        self.last_export_path = target
        logger.info("Export written", extra={"path": str(target), "notes": len(snapshots)})
        return target

    @staticmethod
    def _write(target: Path, snapshots: list[dict[str, Any]], indent: int | None = None) -> None:
        # Each write gets its own sibling temp file, swapped in whole
        payload = json.dumps(snapshots, ensure_ascii=False, indent=indent)
        tmp_name: str | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise PersistenceError(f"Could not write {target}: {e}") from e
