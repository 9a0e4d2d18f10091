"""
Bootstrap de la base Mongo: asegura colecciones e índices mínimos.
Se ejecuta al inicio de la app. No tumba la app si algo falla; deja warnings.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from notepad.infrastructure.db.mongo import get_db

_log = logging.getLogger("notepad.mongo.bootstrap")

USER_INDEXES: List[Dict[str, Any]] = [
    {"keys": [("email", ASCENDING)], "unique": True, "name": "uniq_email"},
    # sparse: usuarios previos al login federado no tienen firebase_uid
    {"keys": [("firebase_uid", ASCENDING)], "unique": True, "sparse": True, "name": "uniq_firebase_uid"},
]

NOTE_INDEXES: List[Dict[str, Any]] = [
    {"keys": [("user_id", ASCENDING), ("created_at", DESCENDING)], "name": "ix_user_created"},
    {
        "keys": [("user_id", ASCENDING), ("is_favorite", ASCENDING), ("created_at", DESCENDING)],
        "name": "ix_user_favorite_created",
    },
]


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for entry in indexes:
        ix = dict(entry)
        keys = ix.pop("keys")
        try:
            coll.create_index(keys, **ix)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_collections() -> None:
    """
    Garantiza los índices de `user` y `note`.
    """
    _ensure_indexes("user", USER_INDEXES)
    _ensure_indexes("note", NOTE_INDEXES)
