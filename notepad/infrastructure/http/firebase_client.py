"""
Verificación de ID Tokens de Firebase Authentication.

Usa `google.oauth2.id_token.verify_firebase_token` con el project id de Firebase
como audiencia (override explícito o el `project_id` de la cuenta de servicio
codificada en base64). El frontend envía el ID token obtenido con el SDK web de
Firebase en `Authorization: Bearer <token>`.
"""
import functools
import logging
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as grequests
from google.oauth2 import id_token
from pydantic import BaseModel

from notepad.core.config import settings


class IdentityVerificationError(Exception):
    pass


class VerifiedToken(BaseModel):
    """Identidad verificada por el proveedor."""
    uid: str
    email: str
    name: Optional[str] = None


_log = logging.getLogger("notepad.identity")

FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"

# Reutiliza la sesión HTTP (y su caché de conexiones) para bajar los certificados
_request = grequests.Request()


def verify_id_token(token: str) -> VerifiedToken:
    """
    Verifica un Firebase ID Token y devuelve la identidad si es válido.
    Cualquier fallo (expirado, mal formado, firma inválida, red) se traduce en
    `IdentityVerificationError`.
    """
    project = settings.firebase_project
    if not project:
        raise IdentityVerificationError("Firebase no configurado (falta cuenta de servicio o project id)")
    req = functools.partial(_request, timeout=settings.identity_timeout_seconds)
    try:
        claims = id_token.verify_firebase_token(
            token,
            req,
            audience=project,
            clock_skew_in_seconds=settings.identity_clock_skew_seconds,
        )
    except (GoogleAuthError, ValueError) as e:
        raise IdentityVerificationError(str(e)) from e
    if not claims:
        raise IdentityVerificationError("Token sin claims")

    # google-auth sólo valida firma, aud y exp; emisor y sub se comprueban aquí
    if claims.get("iss") != f"{FIREBASE_ISSUER_PREFIX}{project}":
        raise IdentityVerificationError("Emisor no válido")
    uid = claims.get("sub")
    if not uid or not isinstance(uid, str):
        raise IdentityVerificationError("Token sin sub")
    email = claims.get("email")
    if not email:
        # Sin email no hay forma de enlazar el usuario local
        raise IdentityVerificationError("Token sin email")
    _log.debug("Token verificado uid=%s", uid)
    return VerifiedToken(uid=uid, email=str(email).lower(), name=claims.get("name"))
