"""Server-rendered UI handlers for one entity type.

Pages are rendered through a ``PageRenderer``; form posts redirect with
303 so the browser follows up with a GET.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import UploadFile

from entityforge.core.slug import path_segment
from entityforge.entity.model import Entity
from entityforge.persistence.uploads import discard_uploads, save_upload
from entityforge.routes.operations import EntityOperations
from entityforge.ui.renderer import PageRenderer

logger = logging.getLogger(__name__)


class FormReader:
    """Payload reader parsing a multipart or urlencoded form.

    Uploaded files are stored under the uploads directory and replaced
    with their stored name. File inputs left empty keep the current value.
    Names of the files stored so far are kept in ``stored`` so a failed
    submission can remove them again.
    """

    def __init__(self, ops: EntityOperations, request: Request):
        self.ops = ops
        self.request = request
        self.stored: list[str] = []

    async def __call__(self, base: Entity | None) -> Entity:
        form = await self.request.form()
        values: dict[str, Any] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                stored = await save_upload(self.ops.context.uploads_dir, value)
                if stored is not None:
                    self.stored.append(stored)
                    values[key] = stored
            else:
                values[key] = value
        return self.ops.schema.from_form(values, base)

    async def discard(self) -> None:
        await discard_uploads(self.ops.context.uploads_dir, self.stored)
        self.stored = []


def ui_handlers(ops: EntityOperations, renderer: PageRenderer) -> dict[str, Callable[..., Any]]:
    """Build the six UI handlers, keyed by route name."""
    schema = ops.schema

    def detail_redirect(saved: Entity) -> RedirectResponse:
        return RedirectResponse(
            f"/{schema.slug}/{path_segment(schema.id_of(saved))}", status_code=303
        )

    async def list_page() -> HTMLResponse:
        entities = await ops.list_all()
        return HTMLResponse(renderer.render_list(schema, entities, ops.names_plural()))

    async def detail_page(id: str) -> HTMLResponse:
        entity = await ops.get(id)
        return HTMLResponse(renderer.render_detail(schema, entity, ops.names_plural()))

    async def add_page() -> HTMLResponse:
        return HTMLResponse(renderer.render_add(schema, ops.names_plural()))

    async def add_submit(request: Request) -> RedirectResponse:
        reader = FormReader(ops, request)
        try:
            saved = await ops.create(request, reader)
        except Exception:
            await reader.discard()
            raise
        return detail_redirect(saved)

    async def update_submit(id: str, request: Request) -> RedirectResponse:
        reader = FormReader(ops, request)
        try:
            saved = await ops.update(request, id, reader)
        except Exception:
            await reader.discard()
            raise
        return detail_redirect(saved)

    async def delete_submit(id: str, request: Request) -> RedirectResponse:
        await ops.delete(request, id)
        return RedirectResponse(f"/{schema.slug_plural}", status_code=303)

    return {
        "ui_list": list_page,
        "ui_detail": detail_page,
        "ui_add_form": add_page,
        "ui_add_submit": add_submit,
        "ui_update_submit": update_submit,
        "ui_delete_submit": delete_submit,
    }
