"""
Blueprint Models

Pydantic models for reusable document templates and their field definitions.
Serialized with camelCase keys so persisted snapshots keep the layout the
blueprint builder UI reads and writes.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_snapshot(self) -> dict:
        """Serialize for persistence (camelCase keys, JSON-compatible values)."""
        return self.model_dump(mode='json', by_alias=True)


class FieldType(str, Enum):
    """Kinds of input slots a blueprint can define."""
    TEXT = "text"
    DATE = "date"
    SIGNATURE = "signature"
    CHECKBOX = "checkbox"


class Position(CamelModel):
    """Layout coordinate of a field on the document canvas."""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class FieldDraft(CamelModel):
    """A field definition that has not been assigned an id yet."""
    model_config = ConfigDict(frozen=True)

    type: FieldType = Field(..., description="Field type (text, date, signature, checkbox)")
    label: str = Field(..., description="Display label")
    position: Position = Field(default_factory=Position, description="Canvas coordinate")
    required: Optional[bool] = Field(None, description="Declared only, not enforced")


class FieldMetadata(FieldDraft):
    """
    A field definition belonging to a blueprint (or, once cloned, to a contract).

    Frozen: the id and type never change after assignment. Layout or label
    edits produce a new FieldMetadata with the same id and type.
    """
    id: str = Field(..., description="Unique field identifier")

    def with_changes(
        self,
        label: Optional[str] = None,
        position: Optional[Position] = None,
        required: Optional[bool] = None
    ) -> "FieldMetadata":
        """Return a copy with an updated label, position or required flag."""
        updates = {}
        if label is not None:
            updates['label'] = label
        if position is not None:
            updates['position'] = position
        if required is not None:
            updates['required'] = required
        return self.model_copy(update=updates)


class Blueprint(CamelModel):
    """A named, ordered set of field definitions used to create contracts."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique blueprint identifier")
    name: str = Field(..., description="Blueprint name")
    description: str = Field("", description="Optional description")
    fields: Tuple[FieldMetadata, ...] = Field((), description="Ordered field definitions")
    created_at: str = Field(..., description="Creation timestamp (ISO-8601)")
    updated_at: str = Field(..., description="Last update timestamp (ISO-8601)")

    def get_field(self, field_id: str) -> Optional[FieldMetadata]:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None
