"""
Directorio de usuarios: enlaza identidades verificadas con usuarios locales.
"""
import logging
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from notepad.repositories import user_repo as repo

_log = logging.getLogger("notepad.users")


def _default_name(email: str, name: Optional[str]) -> str:
    if name and name.strip():
        return name.strip()
    return email.split("@", 1)[0]


def _reread(firebase_uid: str, email: str) -> Optional[Dict[str, Any]]:
    return repo.find_by_firebase_uid(firebase_uid) or repo.find_by_email(email)


def get_by_uid(firebase_uid: str) -> Optional[Dict[str, Any]]:
    return repo.find_by_firebase_uid(firebase_uid)


def resolve_or_create(firebase_uid: str, email: str, name: Optional[str] = None) -> Dict[str, Any]:
    """
    Devuelve el usuario local para una identidad verificada, creándolo si hace falta.

    Orden de búsqueda:
    1. Por `firebase_uid`: se devuelve tal cual (el uid es la clave durable; no
       se pisan email/nombre con datos del token).
    2. Por email (usuarios previos al login federado): se le enlaza el uid y,
       si viene, se actualiza el nombre.
    3. Si no existe, se crea (nombre por defecto: parte local del email).

    Dos primeros logins simultáneos chocan con los índices únicos; el perdedor
    relee la fila existente en lugar de fallar.
    """
    email = email.lower()
    user = repo.find_by_firebase_uid(firebase_uid)
    if user:
        return user

    try:
        existing = repo.find_by_email(email)
        if existing:
            _log.info("Usuario existente por email, enlazando firebase_uid=%s", firebase_uid)
            updated = repo.attach_firebase_uid(existing["_id"], firebase_uid, (name or "").strip() or None)
            if updated:
                return updated
            # Fila desaparecida entre lectura y escritura: se crea abajo

        _log.info("Creando usuario firebase_uid=%s email=%s", firebase_uid, email)
        return repo.insert_user(email=email, name=_default_name(email, name), firebase_uid=firebase_uid)
    except DuplicateKeyError:
        winner = _reread(firebase_uid, email)
        if winner is None:
            raise
        _log.info("Alta concurrente detectada; usando usuario existente id=%s", winner["_id"])
        return winner
