"""DataStore persistence — JSON file and in-memory implementations.

JsonFilePersistence is the server-side stand-in for the browser's local
key-value storage: the whole tree is one JSON document, rewritten after
every mutation. InMemoryPersistence keeps the serialized snapshot in a
string, which gives tests the same round-trip behaviour without disk I/O.

Service module: imports from eduai.hooks.interfaces and eduai.schemas.

Usage:
    from eduai.hooks.persistence import JsonFilePersistence

    persistence = JsonFilePersistence(Path("data/eduai_pro_data.json"))
    store = persistence.load() or DataStore()
    persistence.save(store)
"""

import logging
from pathlib import Path

from eduai.hooks.interfaces import StorePersistence
from eduai.schemas import DataStore

logger = logging.getLogger(__name__)


def _serialize(store: DataStore) -> str:
    return store.model_dump_json(by_alias=True, indent=2)


class JsonFilePersistence(StorePersistence):
    """Stores the DataStore as a single JSON file.

    Writes go to a sibling temp file that is then renamed over the target,
    so a crash mid-write leaves the previous snapshot intact.

    Args:
        path: Location of the JSON document. Parent directories are
            created on first save.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> DataStore | None:
        """Reads and validates the JSON document.

        Returns:
            The stored DataStore, or None if the file does not exist.

        Raises:
            pydantic.ValidationError: If the file exists but is not a valid
                DataStore document.
        """
        if not self._path.exists():
            logger.info("No saved data at %s", self._path)
            return None
        raw = self._path.read_text(encoding="utf-8")
        store = DataStore.model_validate_json(raw)
        logger.info(
            "Loaded data store from %s: %d classes, %d knowledge items",
            self._path,
            len(store.classes),
            len(store.knowledge),
        )
        return store

    def save(self, store: DataStore) -> None:
        """Writes the whole tree, replacing the previous snapshot."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(_serialize(store), encoding="utf-8")
        tmp_path.replace(self._path)
        logger.debug("Saved data store to %s", self._path)


class InMemoryPersistence(StorePersistence):
    """Keeps the last saved snapshot as a JSON string.

    load() always returns a fresh copy, never the object that was saved,
    so callers observe exactly what a reload from disk would give them.
    """

    def __init__(self) -> None:
        self._snapshot: str | None = None
        self.save_count = 0

    def load(self) -> DataStore | None:
        if self._snapshot is None:
            return None
        return DataStore.model_validate_json(self._snapshot)

    def save(self, store: DataStore) -> None:
        self._snapshot = _serialize(store)
        self.save_count += 1
