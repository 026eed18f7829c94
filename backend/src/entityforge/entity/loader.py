"""Load entity definitions from YAML files.

Each ``metadata/entities/*.yaml`` file declares one entity:

    entity: Article
    pluralName: Articles
    fields:
      - name: id
        type: uuid
        primaryKey: true
      - name: title
        type: string
        required: true
      - name: body
        type: markdown

and becomes an ``Entity`` subclass equivalent to a hand-written one.
"""

import types
from pathlib import Path
from typing import Any
from uuid import uuid4

import yaml

from entityforge.core.types import FIELD_TYPES
from entityforge.entity.model import Entity, column


class MetadataLoader:
    """Loads entity classes from YAML files."""

    def __init__(self, metadata_path: Path):
        self.metadata_path = metadata_path
        self.entities: dict[str, type[Entity]] = {}

    def load_all(self) -> None:
        """Load all entities."""
        entities_path = self.metadata_path / "entities"
        if not entities_path.exists():
            return

        for yaml_file in sorted(entities_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if data and "entity" in data:
                name = data["entity"]
                if name in self.entities:
                    raise ValueError(f"Entity '{name}' is defined more than once ({yaml_file.name})")
                self.entities[name] = self._resolve_entity(data)

    def _resolve_entity(self, data: dict[str, Any]) -> type[Entity]:
        """Build an Entity subclass from a YAML definition."""
        name = data["entity"]
        field_defs = data.get("fields", [])

        # Find primary key
        primary_key = data.get("idField", "id")
        for f in field_defs:
            if f.get("primaryKey"):
                primary_key = f["name"]
                break

        annotations: dict[str, Any] = {}
        namespace: dict[str, Any] = {
            "__module__": __name__,
            "__doc__": data.get("description") or f"{name} entity loaded from metadata.",
            "entity_name": name,
            "entity_name_plural": data.get("pluralName", name + "s"),
            "id_field": primary_key,
        }
        for field_def in field_defs:
            field_name = field_def["name"]
            annotation, default = self._resolve_field(
                name, field_def, is_id=field_name == primary_key
            )
            annotations[field_name] = annotation
            namespace[field_name] = default
        namespace["__annotations__"] = annotations

        return types.new_class(name, (Entity,), {}, lambda ns: ns.update(namespace))

    def _resolve_field(
        self, entity_name: str, data: dict[str, Any], is_id: bool
    ) -> tuple[Any, Any]:
        """Convert a field dict to an (annotation, pydantic Field) pair."""
        type_name = data.get("type", "string")
        if type_name not in FIELD_TYPES:
            raise ValueError(
                f"Entity '{entity_name}' field '{data['name']}' has unknown type '{type_name}'"
            )
        python_type = FIELD_TYPES[type_name].python_type
        kwargs: dict[str, Any] = {"field_type": type_name}
        if "displayName" in data:
            kwargs["title"] = data["displayName"]

        if is_id:
            if type_name == "uuid":
                return python_type, column(default_factory=uuid4, **kwargs)
            if type_name == "integer":
                # Assigned by the database on insert
                return python_type | None, column(None, **kwargs)
            return python_type, column(**kwargs)

        if "default" in data:
            return python_type, column(data["default"], **kwargs)
        if data.get("required", False):
            return python_type, column(**kwargs)
        if type_name == "boolean":
            return python_type, column(False, **kwargs)
        return python_type | None, column(None, **kwargs)

    def get_entity(self, name: str) -> type[Entity] | None:
        """Get a loaded entity class by name."""
        return self.entities.get(name)

    def list_entities(self) -> list[str]:
        """List all entity names."""
        return list(self.entities.keys())
