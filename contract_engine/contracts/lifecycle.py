"""
Contract Lifecycle

Status and category tables for the contract approval pipeline:
Created → Approved → Sent → Signed → Locked.
Revoked is terminal and reachable from any status before Signed.
"""

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

logger = logging.getLogger(__name__)


class ContractStatus(str, Enum):
    """Lifecycle states a contract can be in."""
    CREATED = "created"
    APPROVED = "approved"
    SENT = "sent"
    SIGNED = "signed"
    LOCKED = "locked"
    REVOKED = "revoked"


class StatusCategory(str, Enum):
    """Coarse grouping of statuses used for filtering and reporting."""
    ACTIVE = "active"
    PENDING = "pending"
    SIGNED = "signed"


INITIAL_STATUS = ContractStatus.CREATED

# A signed contract has already been executed, so it can only be sealed.
VALID_TRANSITIONS: Dict[ContractStatus, Tuple[ContractStatus, ...]] = {
    ContractStatus.CREATED: (ContractStatus.APPROVED, ContractStatus.REVOKED),
    ContractStatus.APPROVED: (ContractStatus.SENT, ContractStatus.REVOKED),
    ContractStatus.SENT: (ContractStatus.SIGNED, ContractStatus.REVOKED),
    ContractStatus.SIGNED: (ContractStatus.LOCKED,),
    ContractStatus.LOCKED: (),
    ContractStatus.REVOKED: (),
}

STATUS_TO_CATEGORY: Dict[ContractStatus, StatusCategory] = {
    ContractStatus.CREATED: StatusCategory.ACTIVE,
    ContractStatus.APPROVED: StatusCategory.ACTIVE,
    ContractStatus.SENT: StatusCategory.PENDING,
    ContractStatus.SIGNED: StatusCategory.SIGNED,
    ContractStatus.LOCKED: StatusCategory.SIGNED,
    ContractStatus.REVOKED: StatusCategory.ACTIVE,
}

# Field values of contracts in these statuses can no longer be written.
READ_ONLY_STATUSES: FrozenSet[ContractStatus] = frozenset({
    ContractStatus.LOCKED,
    ContractStatus.REVOKED,
})

STATUS_DISPLAY: Dict[ContractStatus, Dict[str, str]] = {
    ContractStatus.CREATED: {'label': 'Created', 'color': '#3b82f6', 'bg_color': '#dbeafe'},
    ContractStatus.APPROVED: {'label': 'Approved', 'color': '#10b981', 'bg_color': '#d1fae5'},
    ContractStatus.SENT: {'label': 'Sent', 'color': '#f59e0b', 'bg_color': '#fef3c7'},
    ContractStatus.SIGNED: {'label': 'Signed', 'color': '#8b5cf6', 'bg_color': '#ede9fe'},
    ContractStatus.LOCKED: {'label': 'Locked', 'color': '#6b7280', 'bg_color': '#f3f4f6'},
    ContractStatus.REVOKED: {'label': 'Revoked', 'color': '#ef4444', 'bg_color': '#fee2e2'},
}


def coerce_status(value: Any) -> Optional[ContractStatus]:
    """
    Convert a raw value into a ContractStatus.

    Args:
        value: ContractStatus or its string value (e.g. 'approved')

    Returns:
        The matching ContractStatus, or None if the value is not a known status
    """
    if isinstance(value, ContractStatus):
        return value
    try:
        return ContractStatus(value)
    except ValueError:
        logger.warning(f"Unknown contract status: {value!r}")
        return None


def coerce_category(value: Any) -> Optional[StatusCategory]:
    """Convert a raw value into a StatusCategory, or None if unknown."""
    if isinstance(value, StatusCategory):
        return value
    try:
        return StatusCategory(value)
    except ValueError:
        logger.warning(f"Unknown status category: {value!r}")
        return None


def allowed_transitions(status: ContractStatus) -> Tuple[ContractStatus, ...]:
    """
    Get the statuses a contract may move to from the given status.

    Only direct successors are listed; there are no transitive jumps.

    Args:
        status: Current contract status

    Returns:
        Tuple of allowed target statuses (empty for terminal statuses)
    """
    return VALID_TRANSITIONS.get(status, ())


def is_valid_transition(current: ContractStatus, target: Any) -> bool:
    """Check whether moving from current to target is a legal edge."""
    target_status = coerce_status(target)
    if target_status is None:
        return False
    return target_status in allowed_transitions(current)


def is_terminal(status: ContractStatus) -> bool:
    """Terminal statuses have no outgoing transitions."""
    return not allowed_transitions(status)


def is_editable(status: ContractStatus) -> bool:
    """Field values may be written unless the contract is locked or revoked."""
    return status not in READ_ONLY_STATUSES


def category_for(status: ContractStatus) -> StatusCategory:
    """Derive the reporting category of a status."""
    return STATUS_TO_CATEGORY[status]


def status_label(status: ContractStatus) -> str:
    """Human-readable label for a status."""
    return STATUS_DISPLAY[status]['label']
