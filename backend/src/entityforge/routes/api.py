"""JSON API handlers for one entity type."""

import json
from collections.abc import Callable
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from entityforge.entity.model import Entity
from entityforge.errors import InvalidPayloadError
from entityforge.routes.operations import EntityOperations, PayloadReader


def _json_reader(ops: EntityOperations, request: Request, id: Any = None) -> PayloadReader:
    """Payload reader decoding the JSON body. The path id wins over the body's."""

    async def read(_: Entity | None) -> Entity:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidPayloadError(f"Request body is not valid JSON: {e}") from None
        if isinstance(body, dict) and id is not None:
            body = {**body, ops.schema.id_field: id}
        return ops.schema.from_wire(body)

    return read


def api_handlers(ops: EntityOperations) -> dict[str, Callable[..., Any]]:
    """Build the five API handlers, keyed by route name."""
    schema = ops.schema

    async def list_entities() -> dict[str, Any]:
        """List all records."""
        entities = await ops.list_all()
        return {"data": [schema.to_wire(e) for e in entities]}

    async def get_entity(id: str) -> dict[str, Any]:
        """Get a single record."""
        entity = await ops.get(id)
        return {"data": schema.to_wire(entity)}

    async def create_entity(request: Request) -> JSONResponse:
        """Create a record from a JSON body."""
        saved = await ops.create(request, _json_reader(ops, request))
        return JSONResponse(status_code=201, content={"data": schema.to_wire(saved)})

    async def update_entity(id: str, request: Request) -> JSONResponse:
        """Replace a record with a JSON body."""
        parsed = schema.parse_id(id)
        saved = await ops.update(request, id, _json_reader(ops, request, parsed))
        return JSONResponse(status_code=200, content={"data": schema.to_wire(saved)})

    async def delete_entity(id: str, request: Request) -> dict[str, Any]:
        """Delete a record."""
        await ops.delete(request, id)
        return {"success": True}

    return {
        "api_list": list_entities,
        "api_get": get_entity,
        "api_create": create_entity,
        "api_update": update_entity,
        "api_delete": delete_entity,
    }
