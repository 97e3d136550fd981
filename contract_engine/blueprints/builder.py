"""
Field Layout Builder

Collects field drafts for a new or edited blueprint, generating default labels
and stacking positions the way the blueprint editor canvas does.
"""

import logging
from typing import List, Optional

from .models import FieldDraft, FieldType, Position

logger = logging.getLogger(__name__)

FIELD_TYPE_LABELS = {
    FieldType.TEXT: "Text Field",
    FieldType.DATE: "Date Field",
    FieldType.SIGNATURE: "Signature",
    FieldType.CHECKBOX: "Checkbox",
}

DEFAULT_X = 50.0
DEFAULT_Y = 50.0
ROW_SPACING = 60.0


class FieldLayoutBuilder:
    """
    Builds an ordered list of FieldDraft objects.

    Example:
        builder = FieldLayoutBuilder()
        builder.add_field(FieldType.TEXT)            # "Text Field 1" at (50, 50)
        builder.add_field(FieldType.SIGNATURE)       # "Signature 1" at (50, 110)
        store.add_blueprint("NDA", "", builder.drafts())
    """

    def __init__(self, fields: Optional[List[FieldDraft]] = None):
        self._fields: List[FieldDraft] = list(fields or [])

    def __len__(self) -> int:
        return len(self._fields)

    def default_label(self, field_type: FieldType) -> str:
        """Label for the next field of a type, e.g. 'Date Field 2'."""
        field_type = FieldType(field_type)
        count = sum(1 for f in self._fields if f.type == field_type)
        return f"{FIELD_TYPE_LABELS[field_type]} {count + 1}"

    def default_position(self) -> Position:
        return Position(x=DEFAULT_X, y=DEFAULT_Y + len(self._fields) * ROW_SPACING)

    def add_field(
        self,
        field_type: FieldType,
        label: Optional[str] = None,
        required: bool = False
    ) -> FieldDraft:
        """
        Append a field with a generated label and position.

        Args:
            field_type: Type of the new field
            label: Explicit label (a default is generated when omitted)
            required: Declared required flag

        Returns:
            The appended FieldDraft
        """
        field_type = FieldType(field_type)
        draft = FieldDraft(
            type=field_type,
            label=label or self.default_label(field_type),
            position=self.default_position(),
            required=required or None,
        )
        self._fields.append(draft)
        logger.debug(f"Added {field_type.value} field '{draft.label}'")
        return draft

    def rename_field(self, index: int, label: str) -> FieldDraft:
        self._fields[index] = self._fields[index].model_copy(update={'label': label})
        return self._fields[index]

    def move_field(self, index: int, x: float, y: float) -> FieldDraft:
        # Canvas coordinates never go negative
        position = Position(x=max(0.0, x), y=max(0.0, y))
        self._fields[index] = self._fields[index].model_copy(update={'position': position})
        return self._fields[index]

    def remove_field(self, index: int) -> FieldDraft:
        return self._fields.pop(index)

    def drafts(self) -> List[FieldDraft]:
        return list(self._fields)
