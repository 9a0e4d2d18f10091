"""Cliente MongoDB (pymongo) compartido por los repositorios."""
from __future__ import annotations

import logging
from typing import Optional

import certifi
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from notepad.core.config import settings

_log = logging.getLogger("notepad.mongo")

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def _build_client() -> MongoClient:
    uri = settings.mongo_uri
    # Timeouts explícitos: ninguna llamada a la base debe colgarse indefinidamente
    kwargs = dict(
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        connectTimeoutMS=settings.mongo_timeout_ms,
        socketTimeoutMS=settings.mongo_timeout_ms,
        tz_aware=True,
    )
    if uri.startswith("mongodb+srv://") or settings.mongo_tls:
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if settings.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
    return MongoClient(uri, **kwargs)


def init_mongo(client: Optional[MongoClient] = None) -> None:
    """
    Inicializa el cliente y valida conexión (ping).
    Llamar una vez en el startup; si ya hay una base inicializada y no se pasa
    cliente, no hace nada.
    """
    global _client, _db
    if client is None and _db is not None:
        return
    if client is not None:
        # Cliente inyectado (tests o app embebida): se usa tal cual
        _client = client
        _db = client[settings.mongo_db]
        return
    try:
        _client = _build_client()
        _client.admin.command("ping")
        _db = _client[settings.mongo_db]
        _log.info("Mongo conectado (db=%s)", settings.mongo_db)
    except PyMongoError as e:
        # No tumbar la app: deja _db en None y loggea
        _log.warning("Mongo no accesible: %s", e)
        _client = None
        _db = None


def get_db() -> Database:
    """
    Devuelve la referencia a la base de datos.
    Úsalo en repositorios/servicios, no en routers.
    """
    if _db is None:
        raise RuntimeError("Mongo no inicializado. Intenta más tarde.")
    return _db


def db_ready() -> bool:
    return _db is not None
