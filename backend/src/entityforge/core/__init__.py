"""Core building blocks shared by entities, storage and the UI."""

from entityforge.core.columns import Column, ColumnValue
from entityforge.core.slug import slugify
from entityforge.core.types import FIELD_TYPES, FieldType, get_field_type, infer_field_type

__all__ = [
    "Column",
    "ColumnValue",
    "FIELD_TYPES",
    "FieldType",
    "get_field_type",
    "infer_field_type",
    "slugify",
]
