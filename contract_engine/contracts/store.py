"""
Contract Store

Owns contract instances and the lifecycle engine that moves them between
statuses. Every transition is validated against VALID_TRANSITIONS, recorded
in the contract's append-only status history, and persisted with the rest of
the collection.

Neither an unknown contract id nor an illegal transition raises: callers get
False (or None) back and are expected to tell the user.
"""

import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from ..blueprints.models import Blueprint, FieldType
from ..clock import Clock
from ..storage.snapshots import BaseSnapshotStore, SnapshotError
from .lifecycle import (
    INITIAL_STATUS,
    ContractStatus,
    StatusCategory,
    allowed_transitions,
    coerce_category,
    coerce_status,
    is_editable,
)
from .models import Contract, FieldValue, StatusTransition

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_NAME = "contract-storage"

ALL_FILTER = "all"


def default_value_for(field_type: FieldType) -> Union[bool, str]:
    """Initial value of a field: unchecked for checkboxes, empty string otherwise."""
    return False if field_type == FieldType.CHECKBOX else ""


class ContractStore:
    """
    In-memory contract collection backed by a named snapshot.

    All reads and writes take the store lock, so a transition's
    read-validate-write sequence cannot interleave with another writer.
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
            snapshot_store: Persistence backend for the contract snapshot
            snapshot_name: Name the collection is persisted under
            clock: Timestamp source (defaults to a UTC wall clock)
        """
        self.snapshot_store = snapshot_store
        self.snapshot_name = snapshot_name
        self.clock = clock or Clock()
        self._lock = threading.RLock()
        self._contracts: List[Contract] = []

        items = snapshot_store.load(snapshot_name)
        if items:
            try:
                self._contracts = [Contract.model_validate(item) for item in items]
            except ValidationError as e:
                logger.error(f"Malformed contract in snapshot '{snapshot_name}': {e}")
                raise SnapshotError(f"Snapshot '{snapshot_name}' holds an invalid contract: {e}") from e
        logger.info(f"ContractStore initialized with {len(self._contracts)} contracts")

    @property
    def contracts(self) -> List[Contract]:
        with self._lock:
            return list(self._contracts)

    def _commit(self, contracts: List[Contract]) -> None:
        # Persist first so a failed write leaves the in-memory collection untouched
        self.snapshot_store.save(
            self.snapshot_name,
            [contract.to_snapshot() for contract in contracts]
        )
        self._contracts = contracts

    def _replace(self, updated: Contract) -> None:
        self._commit([updated if c.id == updated.id else c for c in self._contracts])

    def _find(self, contract_id: str) -> Optional[Contract]:
        for contract in self._contracts:
            if contract.id == contract_id:
                return contract
        return None

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_contract(self, name: str, blueprint: Blueprint) -> Contract:
        """
        Instantiate a blueprint as a new contract.

        The blueprint's fields are deep-copied, so later edits to the
        blueprint never reach this contract.

        Args:
            name: Contract name
            blueprint: Blueprint to instantiate

        Returns:
            The new Contract in the 'created' status
        """
        now = self.clock.timestamp()
        fields = [field.model_copy(deep=True) for field in blueprint.fields]

        contract = Contract(
            id=str(uuid.uuid4()),
            name=name,
            blueprint_id=blueprint.id,
            blueprint_name=blueprint.name,
            status=INITIAL_STATUS,
            fields=fields,
            field_values=[
                FieldValue(field_id=field.id, value=default_value_for(field.type))
                for field in fields
            ],
            created_at=now,
            updated_at=now,
            status_history=[
                StatusTransition(from_status=None, to_status=INITIAL_STATUS, timestamp=now)
            ],
        )

        with self._lock:
            self._commit(self._contracts + [contract])

        logger.info(f"Contract created: {contract.id} ('{name}' from blueprint {blueprint.id})")
        return contract

    # -------------------------------------------------------------------------
    # Field values
    # -------------------------------------------------------------------------

    def update_field_values(
        self,
        contract_id: str,
        values: Iterable[Union[FieldValue, Dict[str, Any]]]
    ) -> Optional[Contract]:
        """
        Write field values of a contract.

        Entries are matched by field id; unmatched fields keep their value and
        ids that are not part of the contract are ignored. Contracts that are
        locked or revoked are returned unchanged.

        Args:
            contract_id: Contract identifier
            values: FieldValue objects or {'fieldId': ..., 'value': ...} dicts

        Returns:
            The contract after the update, or None if it does not exist
        """
        incoming = [
            v if isinstance(v, FieldValue) else FieldValue.model_validate(v)
            for v in values
        ]

        with self._lock:
            contract = self._find(contract_id)
            if contract is None:
                logger.warning(f"Contract not found for field update: {contract_id}")
                return None

            if not is_editable(contract.status):
                logger.warning(
                    f"Ignoring field update for {contract_id}: contract is {contract.status.value}"
                )
                return contract

            known_ids = {fv.field_id for fv in contract.field_values}
            replacements: Dict[str, Any] = {}
            for fv in incoming:
                if fv.field_id in known_ids:
                    replacements[fv.field_id] = fv.value
                else:
                    logger.warning(f"Ignoring value for unknown field {fv.field_id} on {contract_id}")

            updated = contract.model_copy(update={
                'field_values': tuple(
                    FieldValue(field_id=fv.field_id, value=replacements[fv.field_id])
                    if fv.field_id in replacements else fv
                    for fv in contract.field_values
                ),
                'updated_at': self.clock.timestamp(),
            })
            self._replace(updated)

        logger.info(f"Updated {len(replacements)} field values on contract {contract_id}")
        return updated

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def transition_status(self, contract_id: str, new_status: Any) -> bool:
        """
        Move a contract to a new status.

        The target must be a direct successor of the current status in
        VALID_TRANSITIONS. On success the status changes, exactly one
        StatusTransition is appended to the history and updated_at is
        refreshed.

        Args:
            contract_id: Contract identifier
            new_status: Target ContractStatus (or its string value)

        Returns:
            True if the transition was applied, False if the contract does not
            exist or the transition is not allowed (nothing is changed)
        """
        target = coerce_status(new_status)

        with self._lock:
            contract = self._find(contract_id)
            if contract is None:
                logger.warning(f"Contract not found for transition: {contract_id}")
                return False

            if target is None or target not in allowed_transitions(contract.status):
                logger.warning(
                    f"Illegal transition for {contract_id}: "
                    f"{contract.status.value} -> {getattr(target, 'value', new_status)}"
                )
                return False

            now = self.clock.timestamp()
            record = StatusTransition(from_status=contract.status, to_status=target, timestamp=now)
            updated = contract.model_copy(update={
                'status': target,
                'updated_at': now,
                'status_history': contract.status_history + (record,),
            })
            self._replace(updated)

        logger.info(f"Contract {contract_id} transitioned: {record.from_status.value} -> {target.value}")
        return True

    def can_transition_to(self, contract_id: str, new_status: Any) -> bool:
        """Check whether transition_status would succeed, without changing anything."""
        target = coerce_status(new_status)
        with self._lock:
            contract = self._find(contract_id)
            if contract is None or target is None:
                return False
            return target in allowed_transitions(contract.status)

    def get_available_transitions(self, contract_id: str) -> List[ContractStatus]:
        with self._lock:
            contract = self._find(contract_id)
            if contract is None:
                return []
            return list(allowed_transitions(contract.status))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_contract_by_id(self, contract_id: str) -> Optional[Contract]:
        with self._lock:
            return self._find(contract_id)

    def get_contracts_by_category(self, category: Any) -> List[Contract]:
        """
        Get contracts whose status falls in a category.

        active = created, approved, revoked; pending = sent;
        signed = signed, locked.
        """
        wanted = coerce_category(category)
        if wanted is None:
            return []
        with self._lock:
            return [c for c in self._contracts if c.category == wanted]

    def get_contracts_by_status(self, status: Any) -> List[Contract]:
        wanted = coerce_status(status)
        if wanted is None:
            return []
        with self._lock:
            return [c for c in self._contracts if c.status == wanted]

    def search_contracts(self, query: str = "", status_filter: Optional[str] = None) -> List[Contract]:
        """
        Filter contracts for list views.

        Args:
            query: Case-insensitive text matched against contract and blueprint names
            status_filter: 'all', a category ('active', 'pending', 'signed') or a status

        Returns:
            Matching contracts in creation order
        """
        if not status_filter or status_filter == ALL_FILTER:
            results = self.contracts
        elif status_filter in {c.value for c in StatusCategory}:
            results = self.get_contracts_by_category(status_filter)
        else:
            results = self.get_contracts_by_status(status_filter)

        needle = (query or "").strip().lower()
        if needle:
            results = [
                c for c in results
                if needle in c.name.lower() or needle in c.blueprint_name.lower()
            ]
        return results

    def get_stats(self) -> Dict[str, int]:
        """Contract counts overall and per category."""
        with self._lock:
            stats = {'total': len(self._contracts)}
            for category in StatusCategory:
                stats[category.value] = sum(1 for c in self._contracts if c.category == category)
            return stats

    def delete_contract(self, contract_id: str) -> None:
        with self._lock:
            remaining = [c for c in self._contracts if c.id != contract_id]
            if len(remaining) == len(self._contracts):
                logger.warning(f"Contract not found for delete: {contract_id}")
                return
            self._commit(remaining)

        logger.info(f"Contract deleted: {contract_id}")
