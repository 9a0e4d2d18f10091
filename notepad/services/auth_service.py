"""
Autenticación: extrae el bearer token, lo verifica con Firebase y resuelve el
usuario local.
"""
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from notepad.infrastructure.http import firebase_client
from notepad.services import user_service

_log = logging.getLogger("notepad.auth")

BEARER_PREFIX = "Bearer "


class Identity(BaseModel):
    """Identidad de la petición: claims verificados + usuario local."""
    uid: str
    email: str
    name: Optional[str] = None
    user: Dict[str, Any]


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Token de `Authorization: Bearer <token>`, o None si falta o está mal formado."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def authenticate(token: str) -> Identity:
    """
    Verifica el token y devuelve la identidad con su usuario local (creándolo
    en el primer login). Lanza IdentityVerificationError si el token no vale.
    """
    verified = firebase_client.verify_id_token(token)
    user = user_service.resolve_or_create(verified.uid, verified.email, verified.name)
    return Identity(uid=verified.uid, email=verified.email, name=verified.name, user=user)
