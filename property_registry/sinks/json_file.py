"""JSON file persistence for registry snapshots."""

import json
import logging
import os
from pathlib import Path

from property_registry.exceptions import SnapshotError
from property_registry.store.snapshot import RegistrySnapshot

logger = logging.getLogger(__name__)


class SnapshotFile:
    """Read and write a registry snapshot as a single JSON document."""

    def __init__(self, path: str | Path, pretty: bool = False) -> None:
        """Initialize snapshot file.

        Parameters
        ----------
        path : str | Path
            File holding the snapshot. Parent directories are created on save.
        pretty : bool
            Pretty-print JSON output.
        """
        self.path = Path(path)
        self.pretty = pretty

    def exists(self) -> bool:
        """Whether a snapshot has been written."""
        return self.path.is_file()

    def save(self, snapshot: RegistrySnapshot) -> None:
        """Write the snapshot, replacing any previous one atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            if self.pretty:
                json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)
            else:
                json.dump(snapshot.to_dict(), f, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, self.path)
        logger.info("Snapshot written to %s", self.path)

    def load(self) -> RegistrySnapshot | None:
        """Read the snapshot, or None if none has been written yet.

        Raises
        ------
        SnapshotError
            If the file exists but is not a valid snapshot document.
        """
        if not self.exists():
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot file {self.path} does not hold a JSON object")

        logger.info("Snapshot read from %s", self.path)
        return RegistrySnapshot.from_dict(data)
