"""Exception handlers turning errors into API or UI responses."""

import logging
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from entityforge.context import ContextProtocol
from entityforge.errors import EntityForgeError
from entityforge.routes.generator import API_PREFIX
from entityforge.ui.renderer import PageRenderer

logger = logging.getLogger(__name__)


def register_error_handlers(
    app: FastAPI,
    renderer: PageRenderer,
    get_context: Callable[[], ContextProtocol | None],
) -> None:
    """Install the handlers for ``EntityForgeError`` and ``HTTPException``.

    API paths answer with JSON, UI paths with an error page.
    """

    def is_api(request: Request) -> bool:
        return request.url.path.startswith(API_PREFIX + "/")

    def error_page(
        status_code: int, message: str, headers: dict[str, str] | None = None
    ) -> HTMLResponse:
        ctx = get_context()
        names = list(ctx.names_plural()) if ctx is not None else []
        return HTMLResponse(
            renderer.render_error(status_code, message, names),
            status_code=status_code,
            headers=headers,
        )

    @app.exception_handler(EntityForgeError)
    async def entityforge_error_handler(request: Request, exc: EntityForgeError) -> Response:
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
            )

        if is_api(request):
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        return error_page(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if is_api(request) or exc.status_code < 400:
            return await http_exception_handler(request, exc)
        return error_page(exc.status_code, str(exc.detail), exc.headers)
