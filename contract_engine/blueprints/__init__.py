"""
Blueprints Module

Reusable document templates: field models, the blueprint store and the
field layout builder.
"""

from .builder import FieldLayoutBuilder
from .models import Blueprint, FieldDraft, FieldMetadata, FieldType, Position
from .store import BlueprintStore

__all__ = [
    "Blueprint",
    "BlueprintStore",
    "FieldDraft",
    "FieldLayoutBuilder",
    "FieldMetadata",
    "FieldType",
    "Position"
]
