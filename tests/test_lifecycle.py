"""
Lifecycle Tests

Checks the status transition table, category mapping and the contract
store's transition behavior across every (status, target) pair.
"""

import pytest

from contract_engine.blueprints.store import BlueprintStore
from contract_engine.contracts.lifecycle import (
    ContractStatus,
    StatusCategory,
    VALID_TRANSITIONS,
    allowed_transitions,
    category_for,
    coerce_status,
    is_editable,
    is_terminal,
    is_valid_transition,
    status_label,
)
from contract_engine.contracts.store import ContractStore
from contract_engine.storage.snapshots import InMemorySnapshotStore

# Shortest legal path from 'created' to each status
PATHS = {
    ContractStatus.CREATED: [],
    ContractStatus.APPROVED: [ContractStatus.APPROVED],
    ContractStatus.SENT: [ContractStatus.APPROVED, ContractStatus.SENT],
    ContractStatus.SIGNED: [ContractStatus.APPROVED, ContractStatus.SENT, ContractStatus.SIGNED],
    ContractStatus.LOCKED: [
        ContractStatus.APPROVED, ContractStatus.SENT, ContractStatus.SIGNED, ContractStatus.LOCKED
    ],
    ContractStatus.REVOKED: [ContractStatus.REVOKED],
}

ALL_PAIRS = [(s, t) for s in ContractStatus for t in ContractStatus]
LEGAL_PAIRS = [(s, t) for s, t in ALL_PAIRS if t in VALID_TRANSITIONS[s]]
ILLEGAL_PAIRS = [(s, t) for s, t in ALL_PAIRS if t not in VALID_TRANSITIONS[s]]


@pytest.fixture
def stores():
    snapshots = InMemorySnapshotStore()
    return BlueprintStore(snapshots), ContractStore(snapshots)


def contract_in_status(stores, status):
    blueprints, contracts = stores
    bp = blueprints.add_blueprint("Lease", "", [{'type': 'text', 'label': 'Tenant'}])
    contract = contracts.create_contract("Lease 1", bp)
    for step in PATHS[status]:
        assert contracts.transition_status(contract.id, step)
    return contracts.get_contract_by_id(contract.id)


class TestTransitionTable:
    """Static table checks."""

    def test_table_is_exact(self):
        assert VALID_TRANSITIONS == {
            ContractStatus.CREATED: (ContractStatus.APPROVED, ContractStatus.REVOKED),
            ContractStatus.APPROVED: (ContractStatus.SENT, ContractStatus.REVOKED),
            ContractStatus.SENT: (ContractStatus.SIGNED, ContractStatus.REVOKED),
            ContractStatus.SIGNED: (ContractStatus.LOCKED,),
            ContractStatus.LOCKED: (),
            ContractStatus.REVOKED: (),
        }

    def test_terminal_statuses(self):
        assert is_terminal(ContractStatus.LOCKED)
        assert is_terminal(ContractStatus.REVOKED)
        assert not any(is_terminal(s) for s in ContractStatus
                       if s not in (ContractStatus.LOCKED, ContractStatus.REVOKED))

    def test_signed_cannot_be_revoked(self):
        assert allowed_transitions(ContractStatus.SIGNED) == (ContractStatus.LOCKED,)
        assert not is_valid_transition(ContractStatus.SIGNED, ContractStatus.REVOKED)

    def test_no_transitive_jumps(self):
        assert not is_valid_transition(ContractStatus.CREATED, ContractStatus.SENT)
        assert not is_valid_transition(ContractStatus.APPROVED, ContractStatus.SIGNED)

    def test_string_targets_and_unknown_values(self):
        assert is_valid_transition(ContractStatus.CREATED, "approved")
        assert not is_valid_transition(ContractStatus.CREATED, "archived")
        assert coerce_status("archived") is None
        assert coerce_status("sent") is ContractStatus.SENT

    @pytest.mark.parametrize("status,category", [
        (ContractStatus.CREATED, StatusCategory.ACTIVE),
        (ContractStatus.APPROVED, StatusCategory.ACTIVE),
        (ContractStatus.SENT, StatusCategory.PENDING),
        (ContractStatus.SIGNED, StatusCategory.SIGNED),
        (ContractStatus.LOCKED, StatusCategory.SIGNED),
        (ContractStatus.REVOKED, StatusCategory.ACTIVE),
    ])
    def test_category_mapping(self, status, category):
        assert category_for(status) is category

    def test_editability(self):
        assert not is_editable(ContractStatus.LOCKED)
        assert not is_editable(ContractStatus.REVOKED)
        assert is_editable(ContractStatus.SIGNED)

    def test_labels(self):
        assert status_label(ContractStatus.APPROVED) == "Approved"
        assert status_label(ContractStatus.REVOKED) == "Revoked"


class TestStoreTransitions:
    """Transition behavior on stored contracts."""

    @pytest.mark.parametrize("current,target", LEGAL_PAIRS)
    def test_legal_transition_applies(self, stores, current, target):
        _, contracts = stores
        contract = contract_in_status(stores, current)
        history_before = contract.status_history

        assert contracts.can_transition_to(contract.id, target)
        assert contracts.transition_status(contract.id, target) is True

        after = contracts.get_contract_by_id(contract.id)
        assert after.status is target
        assert after.status_history[:-1] == history_before
        assert len(after.status_history) == len(history_before) + 1
        last = after.status_history[-1]
        assert last.from_status is current
        assert last.to_status is target
        assert last.timestamp >= history_before[-1].timestamp
        assert after.updated_at == last.timestamp

    @pytest.mark.parametrize("current,target", ILLEGAL_PAIRS)
    def test_illegal_transition_changes_nothing(self, stores, current, target):
        _, contracts = stores
        contract = contract_in_status(stores, current)

        assert not contracts.can_transition_to(contract.id, target)
        assert contracts.transition_status(contract.id, target) is False

        after = contracts.get_contract_by_id(contract.id)
        assert after == contract

    @pytest.mark.parametrize("terminal", [ContractStatus.LOCKED, ContractStatus.REVOKED])
    def test_terminal_statuses_reject_everything(self, stores, terminal):
        _, contracts = stores
        contract = contract_in_status(stores, terminal)
        assert contracts.get_available_transitions(contract.id) == []
        for target in ContractStatus:
            assert contracts.transition_status(contract.id, target) is False

    def test_unknown_contract(self, stores):
        _, contracts = stores
        assert contracts.transition_status("missing", ContractStatus.APPROVED) is False
        assert contracts.can_transition_to("missing", ContractStatus.APPROVED) is False
        assert contracts.get_available_transitions("missing") == []

    def test_unknown_status_string(self, stores):
        _, contracts = stores
        contract = contract_in_status(stores, ContractStatus.CREATED)
        assert contracts.transition_status(contract.id, "archived") is False
        assert contracts.get_contract_by_id(contract.id).status is ContractStatus.CREATED

    def test_history_starts_with_created(self, stores):
        for status in ContractStatus:
            contract = contract_in_status(stores, status)
            first = contract.status_history[0]
            assert first.from_status is None
            assert first.to_status is ContractStatus.CREATED
            assert len(contract.status_history) == len(PATHS[status]) + 1
