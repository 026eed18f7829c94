"""Entity contract: schema description, identifiers and (de)serialization.

An entity is a pydantic model that declares its names as class variables:

    class Article(Entity):
        entity_name = "Article"
        entity_name_plural = "Articles"

        id: UUID = Field(default_factory=uuid4)
        title: str
        body: str = column("", field_type="markdown")

Every concrete subclass gets an ``EntitySchema`` describing its ordered
columns, id field and slugs. Generic code (routes, storage, rendering) only
talks to the schema, never to concrete field names.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from entityforge.core.columns import ColumnValue
from entityforge.core.slug import slugify
from entityforge.core.types import FieldType, get_field_type, infer_field_type, unwrap_optional
from entityforge.errors import (
    EntityDefinitionError,
    InvalidIdError,
    InvalidPayloadError,
    StorageError,
)

# Form values that leave a checkbox unchecked
_FALSE_VALUES = ("", "0", "off", "false", "no")


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    type: str
    display_name: str
    primary_key: bool = False
    required: bool = False
    nullable: bool = False

    @property
    def field_type(self) -> FieldType:
        return get_field_type(self.type)


def column(default: Any = ..., *, field_type: str | None = None, **kwargs: Any) -> Any:
    """Declare a column with an explicit field type.

    Thin wrapper around ``pydantic.Field``; use ``title=`` for the label.

    Example:
        body: str = column("", field_type="markdown", title="Body text")
    """
    extra = {"column_type": field_type} if field_type else None
    if "default_factory" in kwargs:
        return Field(json_schema_extra=extra, **kwargs)
    return Field(default, json_schema_extra=extra, **kwargs)


def _to_display_name(name: str) -> str:
    """Convert snake_case or camelCase to Title Case."""
    result = []
    for i, char in enumerate(name):
        if char == "_":
            result.append(" ")
            continue
        if char.isupper() and i > 0 and name[i - 1] != "_":
            result.append(" ")
        result.append(char)
    return "".join(result).title()


class EntitySchema:
    """Schema description of one entity type.

    Built once per entity class. Column order follows field declaration
    order, so ``column_names()`` and ``column_values()`` always line up.
    """

    def __init__(self, model: type["Entity"]):
        self.model = model
        self._name = model.entity_name
        self._name_plural = model.entity_name_plural or f"{model.entity_name}s"
        self.id_field = model.id_field

        if self.id_field not in model.model_fields:
            raise EntityDefinitionError(
                f"Entity '{self._name}' has no id field '{self.id_field}'"
            )

        self.fields: tuple[FieldDefinition, ...] = tuple(
            self._resolve_field(name, info) for name, info in model.model_fields.items()
        )
        self.id_type, _ = unwrap_optional(model.model_fields[self.id_field].annotation)
        self._id_adapter: TypeAdapter[Any] = TypeAdapter(self.id_type)

    def _resolve_field(self, name: str, info: Any) -> FieldDefinition:
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        _, nullable = unwrap_optional(info.annotation)
        return FieldDefinition(
            name=name,
            type=extra.get("column_type") or infer_field_type(info.annotation),
            display_name=info.title or _to_display_name(name),
            primary_key=name == self.id_field,
            required=info.is_required(),
            nullable=nullable,
        )

    def __repr__(self) -> str:
        return f"EntitySchema({self._name!r})"

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def name(self) -> str:
        return self._name

    def name_plural(self) -> str:
        return self._name_plural

    @property
    def slug(self) -> str:
        return slugify(self._name)

    @property
    def slug_plural(self) -> str:
        return slugify(self._name_plural)

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    @property
    def number_of_columns(self) -> int:
        return len(self.fields)

    def column_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def column_values(self, entity: "Entity") -> list[ColumnValue]:
        return [
            ColumnValue(
                name=f.name,
                label=f.display_name,
                field_type=f.field_type,
                value=getattr(entity, f.name),
            )
            for f in self.fields
        ]

    def get_field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    # ------------------------------------------------------------------
    # Identifier
    # ------------------------------------------------------------------

    def id_of(self, entity: "Entity") -> Any:
        return getattr(entity, self.id_field)

    def set_id(self, entity: "Entity", id: Any) -> None:
        setattr(entity, self.id_field, id)

    def parse_id(self, raw: str) -> Any:
        """Parse a path segment into the id type.

        Raises:
            InvalidIdError: If the segment is not a valid id
        """
        try:
            return self._id_adapter.validate_python(raw)
        except ValidationError:
            raise InvalidIdError(f"Invalid {self._name} id: '{raw}'") from None

    def new_id(self) -> Any:
        """Generate an id for a new record.

        Only UUID ids are generated here; integer ids are assigned by the
        database and string ids must be supplied by the client.
        """
        if self.id_type is UUID:
            return uuid4()
        return None

    @property
    def id_from_client(self) -> bool:
        """Whether new records take their id from the request."""
        return self.id_type is not UUID and self.id_type is not int

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def to_wire(self, entity: "Entity") -> dict[str, Any]:
        return entity.model_dump(mode="json")

    def from_wire(self, data: Any) -> "Entity":
        """Deserialize a JSON payload.

        Raises:
            InvalidPayloadError: If the payload does not match the schema
        """
        if not isinstance(data, Mapping):
            raise InvalidPayloadError(f"{self._name} payload must be a JSON object")
        try:
            return self.model.model_validate(dict(data))
        except ValidationError as e:
            raise InvalidPayloadError(
                f"Invalid {self._name} payload",
                details=[
                    {
                        "message": err["msg"],
                        "code": "INVALID_FIELD",
                        "field": ".".join(str(part) for part in err["loc"]),
                        "severity": "error",
                    }
                    for err in e.errors()
                ],
            ) from None

    def from_form(self, form: Mapping[str, Any], base: "Entity | None" = None) -> "Entity":
        """Deserialize HTML form fields, optionally on top of an existing entity.

        Unchecked checkboxes are absent from form posts and become False.
        Empty inputs clear nullable columns, leave upload columns untouched
        and otherwise fall back to the declared default.
        """
        data = self.to_wire(base) if base is not None else {}
        for f in self.fields:
            if f.primary_key and not (base is None and self.id_from_client):
                continue
            if f.field_type.name == "boolean":
                data[f.name] = str(form.get(f.name, "")).lower() not in _FALSE_VALUES
                continue
            if f.name not in form:
                continue
            raw = form[f.name]
            if raw == "":
                if f.field_type.upload:
                    continue
                if f.nullable:
                    data[f.name] = None
                    continue
                if not f.required and base is None:
                    continue
            data[f.name] = raw
        return self.from_wire(data)

    # ------------------------------------------------------------------
    # Storage row format
    # ------------------------------------------------------------------

    def to_row(self, entity: "Entity") -> dict[str, Any]:
        dumped = entity.model_dump()
        return {name: dumped[name] for name in self.column_names()}

    def from_row(self, row: Mapping[str, Any]) -> "Entity":
        try:
            return self.model.model_validate(dict(row))
        except ValidationError as e:
            raise StorageError(f"Stored {self._name} row does not match schema: {e}") from e


class Entity(BaseModel):
    """Base class for all entity types.

    Subclasses without an ``entity_name`` are treated as abstract bases
    and get no schema.
    """

    entity_name: ClassVar[str] = ""
    entity_name_plural: ClassVar[str] = ""
    id_field: ClassVar[str] = "id"

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if cls.entity_name:
            cls.__entity__ = EntitySchema(cls)


def schema_of(entity: "Entity | type[Entity]") -> EntitySchema:
    """Return the schema of an entity class or instance.

    Raises:
        EntityDefinitionError: If the class declares no entity_name
    """
    cls = entity if isinstance(entity, type) else type(entity)
    schema = cls.__dict__.get("__entity__")
    if schema is None:
        raise EntityDefinitionError(f"{cls.__name__} does not declare an entity_name")
    return schema
