"""
Middlewares de aplicación: request id, logging por petición, CORS y
autenticación Firebase.
"""
import logging
import time
import uuid
from typing import Iterable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from notepad.core.config import settings
from notepad.infrastructure.http.firebase_client import IdentityVerificationError
from notepad.services import auth_service


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        request.state.request_id = rid
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("notepad.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            rid = getattr(request.state, "request_id", None)
            self.log.info(
                "method=%s path=%s status=%s latency_ms=%s request_id=%s",
                request.method, request.url.path, status, dt_ms, rid,
            )


def is_public_path(path: str, public_paths: Iterable[str]) -> bool:
    """"/" coincide sólo exacto; el resto de entradas son prefijos."""
    for p in public_paths:
        if p == "/":
            if path == "/":
                return True
        elif path == p or path.startswith(p.rstrip("/") + "/"):
            return True
    return False


class FirebaseAuthMiddleware(BaseHTTPMiddleware):
    """
    Filtro de paso: nunca corta la cadena. Si hay un bearer token válido deja
    la identidad en `request.state.identity`; si no, la petición sigue sin
    identidad y cada handler decide si eso es un 401.
    """

    def __init__(self, app: FastAPI, public_paths: Iterable[str] | None = None) -> None:
        super().__init__(app)
        self.public_paths = list(public_paths if public_paths is not None else settings.all_public_paths)
        self.log = logging.getLogger("notepad.auth.filter")

    async def dispatch(self, request: Request, call_next):
        request.state.identity = None
        request.state.auth_error = None
        if not is_public_path(request.url.path, self.public_paths):
            token = auth_service.extract_bearer(request.headers.get("Authorization"))
            if token:
                try:
                    # Verificación y alta de usuario bloquean (red + Mongo): fuera del event loop
                    identity = await run_in_threadpool(auth_service.authenticate, token)
                    request.state.identity = identity
                    self.log.debug("Autenticado uid=%s", identity.uid)
                except IdentityVerificationError as e:
                    self.log.warning("Verificación de token fallida: %s", e)
                except Exception as e:
                    # Token válido pero falló la resolución del usuario (p. ej. Mongo caído):
                    # no es un 401; se guarda para que el handler lo relance como 500
                    self.log.error("Error resolviendo usuario autenticado: %s", e)
                    request.state.auth_error = e
        return await call_next(request)


def add_middlewares(app: FastAPI) -> None:
    # Orden: el último agregado es el más externo. La autenticación queda
    # dentro de CORS para que los preflight no la atraviesen.
    app.add_middleware(FirebaseAuthMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=True,
        max_age=settings.cors_max_age,
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggingMiddleware)
