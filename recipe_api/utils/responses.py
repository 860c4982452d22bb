"""
Response envelope and the route class every router uses.

All bodies look like ``{"status": "success" | "error", "message", "data"?}``.
``GuardedRoute`` wraps each endpoint so an unexpected exception is logged
with its traceback and turned into ``InternalFault`` at the handler
boundary, instead of escaping to the server.
"""

import logging
from typing import Any, Callable

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_api.exceptions import InternalFault, RecipeApiError

logger = logging.getLogger(__name__)


def success(message: str, data: Any = None, status_code: int = 200, **extra: Any) -> JSONResponse:
    body = {"status": "success", "message": message}
    body.update(extra)
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def error(message: str, status_code: int, data: Any = None) -> JSONResponse:
    body = {"status": "error", "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


class GuardedRoute(APIRoute):
    def get_route_handler(self) -> Callable:
        original_handler = super().get_route_handler()

        async def guarded_handler(request: Request) -> Response:
            try:
                return await original_handler(request)
            except (RecipeApiError, StarletteHTTPException, RequestValidationError):
                raise
            except Exception:
                logger.exception("Unhandled error in %s %s", request.method, request.url.path)
                raise InternalFault()

        return guarded_handler
