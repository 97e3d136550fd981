"""
Snapshot Storage

Persists whole entity collections as named snapshots. A store loads its
snapshot once at startup and replaces it in full after every mutation;
there are no partial or incremental writes.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotError(RuntimeError):
    """Raised when a snapshot cannot be read or written."""


class Snapshot(BaseModel):
    """Envelope around a persisted collection."""
    name: str
    version: int = SNAPSHOT_VERSION
    last_updated: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    items: List[Dict[str, Any]] = Field(default_factory=list)


class BaseSnapshotStore(ABC):
    """
    Abstract key-value persistence for named snapshots.

    Implementations decide where snapshots live (files, memory, a host-provided
    key-value store); the entity stores only load and replace by name.
    """

    @abstractmethod
    def load(self, name: str) -> Optional[List[Dict[str, Any]]]:
        """
        Load the items of a named snapshot.

        Args:
            name: Snapshot name (e.g., 'contract-storage')

        Returns:
            List of serialized entities, or None if no snapshot exists
        """
        pass

    @abstractmethod
    def save(self, name: str, items: List[Dict[str, Any]]) -> None:
        """
        Replace a named snapshot with the given items.

        Args:
            name: Snapshot name
            items: Full serialized collection
        """
        pass

    def exists(self, name: str) -> bool:
        return self.load(name) is not None


class InMemorySnapshotStore(BaseSnapshotStore):
    """Keeps snapshots in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self._snapshots: Dict[str, Snapshot] = {}
        for name, items in (initial or {}).items():
            self.save(name, items)

    def load(self, name: str) -> Optional[List[Dict[str, Any]]]:
        snapshot = self._snapshots.get(name)
        if snapshot is None:
            return None
        return json.loads(json.dumps(snapshot.items))

    def save(self, name: str, items: List[Dict[str, Any]]) -> None:
        # Round-trip through JSON so callers never share structures with the store
        self._snapshots[name] = Snapshot(name=name, items=json.loads(json.dumps(items)))
        logger.debug(f"Snapshot '{name}' saved in memory ({len(items)} items)")


class JsonFileSnapshotStore(BaseSnapshotStore):
    """
    Stores each snapshot as <directory>/<name>.json.

    Writes go to a temporary file in the same directory which then replaces
    the snapshot, so a crash mid-write leaves the previous snapshot intact.
    """

    def __init__(self, directory: str):
        """
        Initialize the file snapshot store.

        Args:
            directory: Directory holding the snapshot files (created on first save)
        """
        self.directory = Path(directory)
        logger.info(f"JsonFileSnapshotStore initialized with directory: {directory}")

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def load(self, name: str) -> Optional[List[Dict[str, Any]]]:
        """
        Load a snapshot file.

        Args:
            name: Snapshot name

        Returns:
            Serialized entities, or None if the file is missing or empty

        Raises:
            SnapshotError: If the file exists but cannot be parsed
        """
        path = self.path_for(name)
        if not path.exists() or path.stat().st_size == 0:
            logger.info(f"No snapshot found for '{name}' at {path}")
            return None

        try:
            with open(path, 'r') as f:
                data = json.load(f)
            snapshot = Snapshot(**data)
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.error(f"Failed to load snapshot '{name}': {e}")
            raise SnapshotError(f"Invalid snapshot file {path}: {e}") from e

        logger.info(f"Loaded snapshot '{name}' ({len(snapshot.items)} items)")
        return snapshot.items

    def save(self, name: str, items: List[Dict[str, Any]]) -> None:
        """
        Replace a snapshot file.

        Raises:
            SnapshotError: If the file cannot be written
        """
        path = self.path_for(name)
        snapshot = Snapshot(name=name, items=items)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix='.tmp')
            try:
                with os.fdopen(fd, 'w') as f:
                    json.dump(snapshot.model_dump(), f, indent=2)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
            logger.debug(f"Snapshot '{name}' saved to {path}")
        except OSError as e:
            logger.error(f"Failed to save snapshot '{name}': {e}")
            raise SnapshotError(f"Cannot write snapshot file {path}: {e}") from e
