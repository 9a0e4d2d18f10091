"""Health y monitoreo (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, status

from notepad.core.config import settings
from notepad.infrastructure.db.mongo import db_ready
from notepad.api.schemas.health import HealthOut, PingOut, RootOut


router = APIRouter(tags=["Health"])  # sin prefijo para mantener rutas estables


@router.get("/", response_model=RootOut, summary="Raíz")
def root() -> RootOut:
    return RootOut(name=settings.app_name, status="running")


@router.get("/ping", response_model=PingOut, summary="Ping básico")
def ping() -> PingOut:
    return PingOut(message="pong")


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(ok=True, database=db_ready())
