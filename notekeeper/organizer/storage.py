"""
Local Storage.

A directory-backed key-value store for client-only mode. Each key is a
JSON file (folders.json, notes.json, labels.json) holding the full array
for that entity type. Every save rewrites each key in full; writes go to
a temporary file first and replace the old one atomically.
"""

import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notekeeper.backend.core.exceptions import StorageError
from notekeeper.backend.core.logging import get_logger
from notekeeper.organizer.entities import Folder, Label, Note, Snapshot

logger = get_logger(__name__)

FOLDERS_KEY = "folders"
NOTES_KEY = "notes"
LABELS_KEY = "labels"

_ADAPTERS: dict[str, TypeAdapter] = {
    FOLDERS_KEY: TypeAdapter(tuple[Folder, ...]),
    NOTES_KEY: TypeAdapter(tuple[Note, ...]),
    LABELS_KEY: TypeAdapter(tuple[Label, ...]),
}


class LocalStorage:
    """
    Key-value store rooted at a directory.

    Args:
        directory: Where the key files live; created on first write
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        """Raw stored value for `key`, or None when it was never written."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("Local storage read failed", extra={"key": key, "error": str(e)})
            raise StorageError(f"Could not read {key}") from e

    def set_item(self, key: str, value: str) -> None:
        """Replace the value stored under `key`."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, self._path(key))
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error("Local storage write failed", extra={"key": key, "error": str(e)})
            raise StorageError(f"Could not write {key}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {key}") from e

    def load_snapshot(self) -> Snapshot:
        """
        Read all three collections.

        Missing keys load as empty collections.

        Raises:
            StorageError: If a key cannot be read or does not hold valid data
        """
        values = {}
        for key, adapter in _ADAPTERS.items():
            raw = self.get_item(key)
            if raw is None:
                values[key] = ()
                continue
            try:
                values[key] = adapter.validate_json(raw)
            except PydanticValidationError as e:
                logger.error(
                    "Stored data is invalid",
                    extra={"key": key, "error_count": e.error_count()},
                )
                raise StorageError(f"Stored {key} could not be read") from e

        logger.debug(
            "Snapshot loaded",
            extra={k: len(v) for k, v in values.items()},
        )
        return Snapshot(**values)

    def save_snapshot(self, snapshot: Snapshot) -> None:
        """Rewrite every key from `snapshot`."""
        for key, adapter in _ADAPTERS.items():
            payload = adapter.dump_json(getattr(snapshot, key), indent=2)
            self.set_item(key, payload.decode("utf-8"))
