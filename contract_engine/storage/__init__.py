"""
Storage Module

Named snapshot persistence for the blueprint and contract collections.
"""

from .snapshots import BaseSnapshotStore, InMemorySnapshotStore, JsonFileSnapshotStore, SnapshotError

__all__ = ["BaseSnapshotStore", "InMemorySnapshotStore", "JsonFileSnapshotStore", "SnapshotError"]
