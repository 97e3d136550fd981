"""
Contract Models

A contract is one instantiation of a blueprint: a frozen copy of its fields,
one value per field, a lifecycle status and an append-only status history.
Contracts are immutable; the store replaces them wholesale on every change.
"""

from typing import Dict, Optional, Tuple, Union

from pydantic import ConfigDict, Field

from ..blueprints.models import CamelModel, FieldMetadata
from .lifecycle import ContractStatus, StatusCategory, category_for, is_editable

# bool for checkbox fields; str for text, date and signature (PNG data URL or "")
FieldValueType = Union[bool, str]


class FieldValue(CamelModel):
    """Pairs a field id with its current value. The value is not checked against the field type."""
    model_config = ConfigDict(frozen=True)

    field_id: str = Field(..., description="Id of a field in the owning contract")
    value: FieldValueType = Field(..., description="Checkbox bool, or text/date/signature string")


class StatusTransition(CamelModel):
    """Immutable record of a status change."""
    model_config = ConfigDict(frozen=True)

    from_status: Optional[ContractStatus] = Field(..., alias='from', description="Previous status, None for the first entry")
    to_status: ContractStatus = Field(..., alias='to', description="New status")
    timestamp: str = Field(..., description="When the change was applied (ISO-8601)")


class Contract(CamelModel):
    """
    A materialized blueprint with its own field values and lifecycle status.

    blueprint_id and blueprint_name are captured when the contract is created
    and are not refreshed if the blueprint is later renamed or deleted.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    blueprint_id: str
    blueprint_name: str
    status: ContractStatus = ContractStatus.CREATED
    fields: Tuple[FieldMetadata, ...] = ()
    field_values: Tuple[FieldValue, ...] = ()
    created_at: str
    updated_at: str
    status_history: Tuple[StatusTransition, ...] = ()

    @property
    def category(self) -> StatusCategory:
        return category_for(self.status)

    @property
    def is_editable(self) -> bool:
        return is_editable(self.status)

    def field_value_map(self) -> Dict[str, FieldValueType]:
        """Field values keyed by field id."""
        return {fv.field_id: fv.value for fv in self.field_values}

    def value_for(self, field_id: str) -> Optional[FieldValueType]:
        for fv in self.field_values:
            if fv.field_id == field_id:
                return fv.value
        return None
