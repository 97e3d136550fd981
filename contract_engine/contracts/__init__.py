"""
Contracts Module

Contract instances, the status lifecycle and the field-value guard.
"""

from .lifecycle import ContractStatus, StatusCategory, VALID_TRANSITIONS, STATUS_TO_CATEGORY
from .models import Contract, FieldValue, StatusTransition
from .store import ContractStore

__all__ = [
    "Contract",
    "ContractStatus",
    "ContractStore",
    "FieldValue",
    "StatusCategory",
    "StatusTransition",
    "STATUS_TO_CATEGORY",
    "VALID_TRANSITIONS"
]
