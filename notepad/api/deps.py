"""
Dependencias reutilizables para routers (FastAPI Depends).

- Autenticación: lee la identidad opcional que deja FirebaseAuthMiddleware.
- Mantener esta capa delgada: sin lógica de negocio.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED

from notepad.services.auth_service import Identity


def get_identity(request: Request) -> Optional[Identity]:
    """Identidad de la petición o None (petición anónima).

    Si el token era válido pero la resolución del usuario falló, relanza ese
    error para que el handler global responda 500 en vez de 401.
    """
    error = getattr(request.state, "auth_error", None)
    if error is not None:
        raise error
    return getattr(request.state, "identity", None)


def get_current_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    if identity is None:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def get_current_user(identity: Identity = Depends(get_current_identity)) -> Dict[str, Any]:
    """Documento del usuario local autenticado; 401 si no hay identidad."""
    return identity.user
