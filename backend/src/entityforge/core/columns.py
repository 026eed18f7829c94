"""Column capability: read-only access to a field's runtime value.

Generic code (API serialization, page rendering, diffing) works with
``Column`` objects instead of knowing each concrete field type.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable

from entityforge.core.types import FieldType


@runtime_checkable
class Column(Protocol):
    """Interface every column value exposes. Reading never fails."""

    @property
    def name(self) -> str: ...

    @property
    def value(self) -> Any: ...

    def display(self) -> str: ...


@dataclass(frozen=True)
class ColumnValue:
    """A field's value paired with the field type that knows how to show it.

    Attributes:
        name: Column (field) name
        label: Human-readable column label
        field_type: Registered field type of the column
        value: The instance's current value
    """

    name: str
    label: str
    field_type: FieldType
    value: Any

    @property
    def input_type(self) -> str:
        return self.field_type.ui.input_type

    def display(self) -> str:
        """Format the value as text for listings and detail pages."""
        value = self.value
        if value is None:
            return ""
        if isinstance(value, bool):
            return "Yes" if value else "No"
        fmt = self.field_type.ui.display_format
        if isinstance(value, (datetime, date)):
            return value.strftime(fmt) if fmt and "%" in fmt else value.isoformat()
        return str(value)

    def form_value(self) -> str:
        """Value as it should appear in an HTML input's ``value`` attribute."""
        value = self.value
        if value is None or isinstance(value, bool):
            return ""
        if isinstance(value, datetime):
            return value.strftime("%Y-%m-%dT%H:%M")
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    def __str__(self) -> str:
        return self.display()
