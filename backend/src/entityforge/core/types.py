"""Field type registry with storage and UI defaults."""

import types
import typing
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from uuid import UUID

import sqlalchemy as sa


@dataclass
class UIDefaults:
    input_type: str
    display_format: str | None = None
    alignment: str = "left"


@dataclass
class FieldType:
    name: str
    storage_type: type[sa.types.TypeEngine]
    python_type: type
    ui: UIDefaults
    upload: bool = False


# Built-in field types
FIELD_TYPES: dict[str, FieldType] = {
    "string": FieldType(
        name="string",
        storage_type=sa.String,
        python_type=str,
        ui=UIDefaults(input_type="text"),
    ),
    "text": FieldType(
        name="text",
        storage_type=sa.Text,
        python_type=str,
        ui=UIDefaults(input_type="textarea"),
    ),
    "markdown": FieldType(
        name="markdown",
        storage_type=sa.Text,
        python_type=str,
        ui=UIDefaults(input_type="textarea", display_format="markdown"),
    ),
    "integer": FieldType(
        name="integer",
        storage_type=sa.Integer,
        python_type=int,
        ui=UIDefaults(input_type="number", alignment="right"),
    ),
    "number": FieldType(
        name="number",
        storage_type=sa.Float,
        python_type=float,
        ui=UIDefaults(input_type="number", alignment="right"),
    ),
    "boolean": FieldType(
        name="boolean",
        storage_type=sa.Boolean,
        python_type=bool,
        ui=UIDefaults(input_type="checkbox"),
    ),
    "date": FieldType(
        name="date",
        storage_type=sa.Date,
        python_type=date,
        ui=UIDefaults(input_type="date", display_format="%Y-%m-%d"),
    ),
    "datetime": FieldType(
        name="datetime",
        storage_type=sa.DateTime,
        python_type=datetime,
        ui=UIDefaults(input_type="datetime-local", display_format="%Y-%m-%d %H:%M"),
    ),
    "uuid": FieldType(
        name="uuid",
        storage_type=sa.Uuid,
        python_type=UUID,
        ui=UIDefaults(input_type="text"),
    ),
    "file": FieldType(
        name="file",
        storage_type=sa.String,  # Stored name inside the uploads directory
        python_type=str,
        ui=UIDefaults(input_type="file"),
        upload=True,
    ),
    "image": FieldType(
        name="image",
        storage_type=sa.String,
        python_type=str,
        ui=UIDefaults(input_type="file", display_format="image"),
        upload=True,
    ),
}

# Python annotation -> field type name. bool must precede int (bool is an int).
_PYTHON_TYPES: list[tuple[type, str]] = [
    (bool, "boolean"),
    (int, "integer"),
    (float, "number"),
    (datetime, "datetime"),  # datetime is a date subclass
    (date, "date"),
    (UUID, "uuid"),
    (str, "string"),
]


def get_field_type(type_name: str) -> FieldType:
    """Get field type definition, defaulting to string if unknown."""
    return FIELD_TYPES.get(type_name, FIELD_TYPES["string"])


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip ``None`` from ``X | None`` / ``Optional[X]`` annotations.

    Returns:
        Tuple of (inner annotation, whether None was allowed)
    """
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def infer_field_type(annotation: Any) -> str:
    """Map a Python type annotation to a field type name.

    Unknown annotations are treated as strings.
    """
    inner, _ = unwrap_optional(annotation)
    if isinstance(inner, type):
        for python_type, type_name in _PYTHON_TYPES:
            if issubclass(inner, python_type):
                return type_name
    return "string"
