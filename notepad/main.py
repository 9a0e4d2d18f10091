"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging

from fastapi import FastAPI
from pymongo.errors import PyMongoError

from notepad.core.config import settings
from notepad.infrastructure.db.mongo import init_mongo, db_ready
from notepad.infrastructure.db.bootstrap import ensure_collections
from notepad.api.router import api_router
from notepad.api.routers import health
from notepad.core.logging import setup_logging
from notepad.core.middleware import add_middlewares
from notepad.core.exceptions import register_exception_handlers

_log = logging.getLogger("notepad.startup")

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)

add_middlewares(app)
register_exception_handlers(app)


# Startup
@app.on_event("startup")
def on_startup():
    init_mongo()
    # Garantiza índices mínimos si hay conexión
    try:
        if db_ready():
            ensure_collections()
        else:
            _log.warning("Mongo no listo; omitiendo ensure_collections()")
    except PyMongoError as e:
        # No impedir el arranque si fallan los índices
        _log.warning("ensure_collections() falló: %s", e)
    if not settings.identity_configured:
        _log.warning("Firebase no configurado; todas las rutas protegidas responderán 401")
    if not settings.mail_configured:
        _log.warning("Proveedor de correo (%s) no configurado; el envío de notas fallará", settings.mail_provider)


# Health en la raíz; la API bajo el prefijo configurado
app.include_router(health.router)
app.include_router(api_router, prefix=settings.api_prefix_normalized)
