"""
Errores de dominio y handlers globales para respuestas de error consistentes.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class NotFoundError(LookupError):
    """Recurso inexistente o de otro usuario (indistinguibles a propósito)."""


class DeliveryError(RuntimeError):
    """El proveedor de correo no pudo entregar el mensaje."""


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, **fields: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = dict(fields)
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notepad.errors")

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, message=exc.detail or "HTTP error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        content = _body(request, message="Validation error", errors=jsonable_encoder(exc.errors()))
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(NotFoundError)
    async def _not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_body(request, message=str(exc) or "Not found"))

    @app.exception_handler(DeliveryError)
    async def _delivery_handler(request: Request, exc: DeliveryError):
        log.error("Fallo de entrega de correo request_id=%s: %s", _req_id(request), exc)
        content = _body(request, error="Failed to send email", message=str(exc))
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        return JSONResponse(status_code=500, content=_body(request, message="Internal server error"))
