"""
Repositorio para la colección `user`.
"""
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from notepad.core.time import now_utc
from notepad.infrastructure.db.mongo import get_db

COLLECTION = "user"


def find_by_firebase_uid(firebase_uid: str) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({"firebase_uid": firebase_uid})


def find_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Busca usuario por email (en minúsculas)."""
    return get_db()[COLLECTION].find_one({"email": email.lower()})


def insert_user(*, email: str, name: str, firebase_uid: Optional[str] = None) -> Dict[str, Any]:
    """
    Inserta un usuario y devuelve el documento completo.
    Puede lanzar DuplicateKeyError (email o firebase_uid ya existentes).
    """
    now = now_utc()
    doc: Dict[str, Any] = {
        "email": email.lower(),
        "name": name,
        "created_at": now,
        "updated_at": now,
    }
    # Sin firebase_uid no se guarda la clave (índice único sparse)
    if firebase_uid:
        doc["firebase_uid"] = firebase_uid
    res = get_db()[COLLECTION].insert_one(doc)
    doc["_id"] = res.inserted_id
    return doc


def attach_firebase_uid(user_id: ObjectId, firebase_uid: str, name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Enlaza el uid federado a un usuario existente (y actualiza el nombre si viene).
    Puede lanzar DuplicateKeyError si otro usuario ya tiene ese uid.
    """
    fields: Dict[str, Any] = {"firebase_uid": firebase_uid, "updated_at": now_utc()}
    if name:
        fields["name"] = name
    return get_db()[COLLECTION].find_one_and_update(
        {"_id": user_id},
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )
