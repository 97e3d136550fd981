"""
Blueprint Store

Owns the catalog of reusable templates. The collection is hydrated from a
named snapshot at construction and the snapshot is rewritten after every
add, update or delete.
"""

import logging
import threading
import uuid
from typing import Any, Iterable, List, Optional, Union

from pydantic import ValidationError

from ..clock import Clock
from ..storage.snapshots import BaseSnapshotStore, SnapshotError
from .models import Blueprint, FieldDraft, FieldMetadata

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_NAME = "blueprint-storage"

# Attributes a partial update may change; id and created_at are fixed at creation.
UPDATABLE_ATTRIBUTES = ('name', 'description', 'fields')


def new_id() -> str:
    return str(uuid.uuid4())


def assign_field_ids(fields: Iterable[Union[FieldDraft, FieldMetadata, dict]]) -> List[FieldMetadata]:
    """
    Turn field drafts into field definitions with fresh ids.

    FieldMetadata entries keep their existing id; drafts (or dicts without
    an id) receive a new one.
    """
    result = []
    for field in fields:
        if isinstance(field, FieldMetadata):
            result.append(field)
            continue
        if isinstance(field, FieldDraft):
            data = field.model_dump()
        else:
            data = dict(field)
        if not data.get('id'):
            data['id'] = new_id()
        result.append(FieldMetadata.model_validate(data))
    return result


def keep_field_types(current: Blueprint, fields: List[FieldMetadata]) -> List[FieldMetadata]:
    """
    Re-id replacement fields that would change the type of an existing field.

    A field id is bound to one type for life. An entry reusing the id of a
    field in the current blueprint with a different type becomes a new field.
    """
    result = []
    for field in fields:
        existing = current.get_field(field.id)
        if existing is not None and existing.type != field.type:
            logger.warning(
                f"Field {field.id} cannot change type from {existing.type.value} "
                f"to {field.type.value}; assigning a new id"
            )
            field = field.model_copy(update={'id': new_id()})
        result.append(field)
    return result


class BlueprintStore:
    """
    In-memory blueprint collection backed by a named snapshot.

    Blueprints are frozen. Mutations replace the stored Blueprint with a new
    object, so a Blueprint returned earlier keeps the state it was read with.
    """

    def __init__(
        self,
        snapshot_store: BaseSnapshotStore,
        snapshot_name: str = DEFAULT_SNAPSHOT_NAME,
        clock: Optional[Clock] = None
    ):
        """
        Initialize the store and hydrate it from its snapshot.

        Args:
            snapshot_store: Persistence backend for the blueprint snapshot
            snapshot_name: Name the collection is persisted under
            clock: Timestamp source (defaults to a UTC wall clock)
        """
        self.snapshot_store = snapshot_store
        self.snapshot_name = snapshot_name
        self.clock = clock or Clock()
        self._lock = threading.RLock()
        self._blueprints: List[Blueprint] = []

        items = snapshot_store.load(snapshot_name)
        if items:
            try:
                self._blueprints = [Blueprint.model_validate(item) for item in items]
            except ValidationError as e:
                logger.error(f"Malformed blueprint in snapshot '{snapshot_name}': {e}")
                raise SnapshotError(f"Snapshot '{snapshot_name}' holds an invalid blueprint: {e}") from e
        logger.info(f"BlueprintStore initialized with {len(self._blueprints)} blueprints")

    @property
    def blueprints(self) -> List[Blueprint]:
        with self._lock:
            return list(self._blueprints)

    def _commit(self, blueprints: List[Blueprint]) -> None:
        # Persist first so a failed write leaves the in-memory collection untouched
        self.snapshot_store.save(
            self.snapshot_name,
            [bp.to_snapshot() for bp in blueprints]
        )
        self._blueprints = blueprints

    def add_blueprint(
        self,
        name: str,
        description: str = "",
        fields: Optional[Iterable[Union[FieldDraft, dict]]] = None
    ) -> Blueprint:
        """
        Create a blueprint.

        Args:
            name: Blueprint name (non-empty; checked by the caller)
            description: Optional description
            fields: Field definitions without ids

        Returns:
            The new Blueprint, with fresh ids for itself and every field
        """
        now = self.clock.timestamp()
        drafts = []
        for field in fields or []:
            if isinstance(field, FieldMetadata):
                # Copy as a draft so the new blueprint never shares ids with another
                field = FieldDraft.model_validate(field.model_dump(exclude={'id'}))
            elif isinstance(field, dict):
                field = {k: v for k, v in field.items() if k != 'id'}
            drafts.append(field)

        blueprint = Blueprint(
            id=new_id(),
            name=name,
            description=description or "",
            fields=assign_field_ids(drafts),
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            self._commit(self._blueprints + [blueprint])

        logger.info(f"Blueprint created: {blueprint.id} ('{name}', {len(blueprint.fields)} fields)")
        return blueprint

    def update_blueprint(self, blueprint_id: str, **updates: Any) -> None:
        """
        Apply a partial update to a blueprint.

        Contracts already created from the blueprint keep their own copy of
        the fields and are not affected. A replacement field that reuses an
        existing id with a different type is stored under a new id.

        Args:
            blueprint_id: Blueprint identifier
            **updates: Any of name, description, fields
        """
        ignored = [key for key in updates if key not in UPDATABLE_ATTRIBUTES]
        if ignored:
            logger.warning(f"Ignoring non-updatable blueprint attributes: {ignored}")

        changes = {key: value for key, value in updates.items() if key in UPDATABLE_ATTRIBUTES}
        if 'fields' in changes:
            changes['fields'] = assign_field_ids(changes['fields'] or [])

        with self._lock:
            current = self._find(blueprint_id)
            if current is None:
                logger.warning(f"Blueprint not found for update: {blueprint_id}")
                return

            if 'fields' in changes:
                changes['fields'] = keep_field_types(current, changes['fields'])

            data = current.model_dump()
            data.update(changes)
            data['updated_at'] = self.clock.timestamp()
            updated = Blueprint.model_validate(data)

            self._commit([updated if bp.id == blueprint_id else bp for bp in self._blueprints])

        logger.info(f"Blueprint updated: {blueprint_id} ({', '.join(changes) or 'timestamp only'})")

    def delete_blueprint(self, blueprint_id: str) -> None:
        with self._lock:
            remaining = [bp for bp in self._blueprints if bp.id != blueprint_id]
            if len(remaining) == len(self._blueprints):
                logger.warning(f"Blueprint not found for delete: {blueprint_id}")
                return
            self._commit(remaining)

        logger.info(f"Blueprint deleted: {blueprint_id}")

    def get_blueprint_by_id(self, blueprint_id: str) -> Optional[Blueprint]:
        with self._lock:
            return self._find(blueprint_id)

    def search_blueprints(self, query: str) -> List[Blueprint]:
        """Case-insensitive match on name or description. A blank query returns everything."""
        needle = (query or "").strip().lower()
        with self._lock:
            if not needle:
                return list(self._blueprints)
            return [
                bp for bp in self._blueprints
                if needle in bp.name.lower() or needle in bp.description.lower()
            ]

    def _find(self, blueprint_id: str) -> Optional[Blueprint]:
        for bp in self._blueprints:
            if bp.id == blueprint_id:
                return bp
        return None
