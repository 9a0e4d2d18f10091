"""
Repositorio de la colección `note`.

Todas las consultas filtran por `user_id`: una nota sólo existe para su dueño.
Los ids inválidos se tratan como inexistentes.
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument

from notepad.infrastructure.db.mongo import get_db

COLLECTION = "note"

# Más recientes primero; _id desempata notas creadas en el mismo milisegundo
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def _oid(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _owned(user_id: ObjectId, note_id: Any) -> Optional[Dict[str, Any]]:
    """Filtro id + dueño, o None si el id no es válido."""
    oid = _oid(note_id)
    if oid is None:
        return None
    return {"_id": oid, "user_id": user_id}


def insert_note(
    user_id: ObjectId,
    *,
    title: str,
    content: str,
    is_favorite: bool,
    now: datetime,
) -> Dict[str, Any]:
    """Inserta nota con created_at == updated_at y devuelve el documento."""
    doc: Dict[str, Any] = {
        "user_id": user_id,
        "title": title,
        "content": content,
        "is_favorite": is_favorite,
        "created_at": now,
        "updated_at": now,
    }
    res = get_db()[COLLECTION].insert_one(doc)
    doc["_id"] = res.inserted_id
    return doc


def find_note(user_id: ObjectId, note_id: Any) -> Optional[Dict[str, Any]]:
    filtro = _owned(user_id, note_id)
    if filtro is None:
        return None
    return get_db()[COLLECTION].find_one(filtro)


def list_notes(user_id: ObjectId, favorite: Optional[bool] = None) -> List[Dict[str, Any]]:
    """Lista notas del usuario (opcionalmente sólo favoritas), más recientes primero."""
    filtro: Dict[str, Any] = {"user_id": user_id}
    if favorite is not None:
        filtro["is_favorite"] = favorite
    return list(get_db()[COLLECTION].find(filtro).sort(NEWEST_FIRST))


def search_notes(user_id: ObjectId, keyword: str) -> List[Dict[str, Any]]:
    """Subcadena case-insensitive en título o contenido."""
    pattern = {"$regex": re.escape(keyword), "$options": "i"}
    filtro = {"user_id": user_id, "$or": [{"title": pattern}, {"content": pattern}]}
    return list(get_db()[COLLECTION].find(filtro).sort(NEWEST_FIRST))


def update_note(user_id: ObjectId, note_id: Any, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Aplica `fields` en una sola operación atómica filtrada por id y dueño.
    Devuelve el documento actualizado o None si no existe para ese usuario.
    """
    filtro = _owned(user_id, note_id)
    if filtro is None:
        return None
    return get_db()[COLLECTION].find_one_and_update(
        filtro,
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )


def delete_note(user_id: ObjectId, note_id: Any) -> bool:
    filtro = _owned(user_id, note_id)
    if filtro is None:
        return False
    return get_db()[COLLECTION].delete_one(filtro).deleted_count == 1


def count_notes(user_id: ObjectId, favorite: Optional[bool] = None) -> int:
    filtro: Dict[str, Any] = {"user_id": user_id}
    if favorite is not None:
        filtro["is_favorite"] = favorite
    return get_db()[COLLECTION].count_documents(filtro)
