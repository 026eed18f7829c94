"""Jinja2 page renderer for the server-rendered entity UI.

The handlers only depend on the ``PageRenderer`` protocol; applications
can pass their own implementation or override individual templates by
pointing ``JinjaRenderer`` at a directory with same-named files.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from entityforge.core.slug import path_segment, slugify

if TYPE_CHECKING:
    from entityforge.entity.model import Entity, EntitySchema

# Template directory
TEMPLATES_DIR = Path(__file__).parent / "templates"


class PageRenderer(Protocol):
    """Interface the UI handlers render pages through."""

    def render_list(
        self, schema: EntitySchema, entities: list[Entity], names_plural: Iterable[str]
    ) -> str: ...

    def render_detail(
        self, schema: EntitySchema, entity: Entity, names_plural: Iterable[str]
    ) -> str: ...

    def render_add(self, schema: EntitySchema, names_plural: Iterable[str]) -> str: ...

    def render_error(
        self, status_code: int, message: str, names_plural: Iterable[str]
    ) -> str: ...


@dataclass
class FormField:
    """One input of an entity form."""

    name: str
    label: str
    input_type: str
    value: str = ""
    checked: bool = False
    required: bool = False


def form_fields(schema: EntitySchema, entity: Entity | None = None) -> list[FormField]:
    """Build the editable inputs for an add (no entity) or edit form."""
    values = {c.name: c for c in schema.column_values(entity)} if entity is not None else {}
    fields = []
    for f in schema.fields:
        if f.primary_key and not (entity is None and schema.id_from_client):
            continue
        current = values.get(f.name)
        fields.append(
            FormField(
                name=f.name,
                label=f.display_name,
                input_type=f.field_type.ui.input_type,
                value=current.form_value() if current else "",
                checked=bool(current.value) if current else False,
                required=f.required and not f.field_type.upload,
            )
        )
    return fields


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Set up the Jinja2 environment with the URL filters.

    Args:
        templates_dir: Optional directory whose templates take precedence
            over the packaged ones.
    """
    loaders = []
    if templates_dir is not None:
        loaders.append(FileSystemLoader(str(templates_dir)))
    loaders.append(FileSystemLoader(str(TEMPLATES_DIR)))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["slug"] = slugify
    env.filters["path_segment"] = path_segment
    return env


class JinjaRenderer:
    """Default PageRenderer backed by the packaged templates."""

    def __init__(self, templates_dir: Path | None = None, title: str = "EntityForge"):
        self.env = create_environment(templates_dir)
        self.title = title

    def _render(self, template: str, names_plural: Iterable[str], **context: Any) -> str:
        return self.env.get_template(template).render(
            site_title=self.title,
            names_plural=list(names_plural),
            **context,
        )

    def render_list(
        self, schema: EntitySchema, entities: list[Entity], names_plural: Iterable[str]
    ) -> str:
        rows = [
            {"id": schema.id_of(e), "columns": schema.column_values(e)} for e in entities
        ]
        return self._render(
            "list.html",
            names_plural,
            schema=schema,
            column_labels=[f.display_name for f in schema.fields],
            rows=rows,
        )

    def render_detail(
        self, schema: EntitySchema, entity: Entity, names_plural: Iterable[str]
    ) -> str:
        return self._render(
            "detail.html",
            names_plural,
            schema=schema,
            entity_id=schema.id_of(entity),
            columns=schema.column_values(entity),
            fields=form_fields(schema, entity),
        )

    def render_add(self, schema: EntitySchema, names_plural: Iterable[str]) -> str:
        return self._render(
            "add.html",
            names_plural,
            schema=schema,
            fields=form_fields(schema),
        )

    def render_error(
        self, status_code: int, message: str, names_plural: Iterable[str]
    ) -> str:
        return self._render(
            "error.html",
            names_plural,
            status_code=status_code,
            message=message,
        )
