"""Rutas de autenticación: verificación de token, usuario actual y logout."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from starlette.concurrency import run_in_threadpool

from notepad.api.deps import get_current_identity
from notepad.api.schemas.auth import MessageOut, UserOut, VerifyTokenOut
from notepad.infrastructure.http.firebase_client import IdentityVerificationError
from notepad.services import auth_service, user_service
from notepad.services.auth_service import Identity

router = APIRouter(prefix="/auth", tags=["Auth"])

_log = logging.getLogger("notepad.auth")


@router.post(
    "/verify-token",
    response_model=VerifyTokenOut,
    summary="Verificar Firebase ID token",
    description="Verifica el bearer token, crea o enlaza el usuario local y devuelve su identidad.",
)
async def verify_token(authorization: Optional[str] = Header(default=None)):
    token = auth_service.extract_bearer(authorization)
    if token is None:
        _log.warning("Cabecera Authorization ausente o mal formada")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authorization header format")
    try:
        identity = await run_in_threadpool(auth_service.authenticate, token)
    except IdentityVerificationError as e:
        _log.warning("Token inválido: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    _log.info("Token verificado para uid=%s", identity.uid)
    return VerifyTokenOut(
        uid=identity.uid,
        email=identity.email,
        name=identity.name,
        user_id=str(identity.user["_id"]),
    )


@router.get("/user", response_model=UserOut, summary="Usuario autenticado")
def current_user(identity: Identity = Depends(get_current_identity)):
    user = user_service.get_by_uid(identity.uid)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserOut.from_doc(user)


@router.post("/logout", response_model=MessageOut, summary="Cerrar sesión")
def logout():
    # Sin sesión en servidor: el cliente descarta su token de Firebase
    return MessageOut(message="Logged out successfully")
