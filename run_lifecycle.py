#!/usr/bin/env python3
"""
Contract Engine - Lifecycle Walkthrough Script

Demonstrates the complete blueprint-to-contract lifecycle:
1. Build a blueprint with the field layout builder
2. Create a contract from it
3. Attempt an illegal transition
4. Approve and send the contract
5. Fill in field values (including a captured signature)
6. Sign and lock the contract
7. Show that the locked contract rejects edits

Usage:
    python run_lifecycle.py
"""

import logging
import sys
from typing import Any, Dict

from contract_engine.blueprints.builder import FieldLayoutBuilder
from contract_engine.blueprints.models import FieldType
from contract_engine.blueprints.store import BlueprintStore
from contract_engine.config import ConfigError, configure_logging, load_config
from contract_engine.contracts.lifecycle import ContractStatus, status_label
from contract_engine.contracts.store import ContractStore
from contract_engine.signature.capture import encode_signature, render_signature
from contract_engine.storage.snapshots import JsonFileSnapshotStore, SnapshotError

logger = logging.getLogger(__name__)


def print_separator(title: str = "") -> None:
    """Print a formatted separator line."""
    if title:
        print(f"\n{'='*70}")
        print(f"  {title}")
        print(f"{'='*70}\n")
    else:
        print(f"{'='*70}")


def request_transition(store: ContractStore, contract_id: str, status: ContractStatus) -> bool:
    ok = store.transition_status(contract_id, status)
    mark = "✓" if ok else "✗"
    print(f"  {mark} -> {status_label(status)}: {'applied' if ok else 'not allowed'}")
    return ok


def main() -> int:
    """Run the lifecycle walkthrough."""
    print_separator("CONTRACT ENGINE - Lifecycle Walkthrough")

    try:
        # 1. Setup
        print("Step 1: Loading configuration...")
        config: Dict[str, Any] = load_config()
        configure_logging(config['log_level'])
        logger.info("Configuration loaded successfully")

        snapshots = JsonFileSnapshotStore(config['storage_dir'])
        blueprint_store = BlueprintStore(snapshots, snapshot_name=config['blueprint_snapshot'])
        contract_store = ContractStore(snapshots, snapshot_name=config['contract_snapshot'])
        print(f"  Storage: {config['storage_dir']}")
        print(f"  Existing blueprints: {len(blueprint_store.blueprints)}")
        print(f"  Existing contracts:  {len(contract_store.contracts)}")

        # 2. Blueprint
        print_separator("Step 2: Building Blueprint")

        builder = FieldLayoutBuilder()
        builder.add_field(FieldType.TEXT, label="Client Name", required=True)
        builder.add_field(FieldType.DATE, label="Effective Date")
        builder.add_field(FieldType.CHECKBOX, label="Terms Accepted")
        builder.add_field(FieldType.SIGNATURE)

        blueprint = blueprint_store.add_blueprint(
            "Service Agreement",
            "Standard services contract",
            builder.drafts()
        )
        print(f"✓ Blueprint created: {blueprint.name} ({blueprint.id})")
        for field in blueprint.fields:
            print(f"  - {field.label} [{field.type.value}] at ({field.position.x:.0f}, {field.position.y:.0f})")

        # 3. Contract
        print_separator("Step 3: Creating Contract")

        contract = contract_store.create_contract("Acme Corp - 2026", blueprint)
        print(f"✓ Contract created: {contract.name} ({contract.id})")
        print(f"  Status: {status_label(contract.status)}, history entries: {len(contract.status_history)}")

        # 4. Lifecycle
        print_separator("Step 4: Moving Through the Lifecycle")

        request_transition(contract_store, contract.id, ContractStatus.SENT)
        request_transition(contract_store, contract.id, ContractStatus.APPROVED)
        request_transition(contract_store, contract.id, ContractStatus.SENT)

        # 5. Field values
        print_separator("Step 5: Filling In Field Values")

        by_label = {field.label: field for field in contract.fields}
        signature = encode_signature(render_signature([[(20, 100), (80, 40), (140, 110), (220, 50)]]))
        contract_store.update_field_values(contract.id, [
            {'fieldId': by_label['Client Name'].id, 'value': 'Acme Corp'},
            {'fieldId': by_label['Effective Date'].id, 'value': '2026-11-01'},
            {'fieldId': by_label['Terms Accepted'].id, 'value': True},
            {'fieldId': by_label['Signature 1'].id, 'value': signature},
        ])
        print("✓ Field values saved")

        request_transition(contract_store, contract.id, ContractStatus.SIGNED)
        request_transition(contract_store, contract.id, ContractStatus.REVOKED)
        request_transition(contract_store, contract.id, ContractStatus.LOCKED)

        # 6. Locked contract
        print_separator("Step 6: Editing a Locked Contract")

        contract_store.update_field_values(contract.id, [
            {'fieldId': by_label['Client Name'].id, 'value': 'Someone Else'},
        ])
        locked = contract_store.get_contract_by_id(contract.id)
        print(f"  Client Name is still: {locked.value_for(by_label['Client Name'].id)}")

        # 7. Summary
        print_separator("Step 7: Summary")

        print("Status History:")
        for record in locked.status_history:
            origin = status_label(record.from_status) if record.from_status else "-"
            print(f"  {record.timestamp}  {origin:>9} -> {status_label(record.to_status)}")

        stats = contract_store.get_stats()
        print("\nContracts:")
        print(f"  Total:   {stats['total']}")
        print(f"  Active:  {stats['active']}")
        print(f"  Pending: {stats['pending']}")
        print(f"  Signed:  {stats['signed']}")

        print_separator("Walkthrough Complete")
        return 0

    except (ConfigError, SnapshotError) as e:
        logger.error(f"Walkthrough failed: {e}", exc_info=True)
        print(f"\n❌ Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
