"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Identidad (Firebase), Email.
"""
import base64
import binascii
import json
from functools import cached_property
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Notepad API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # CORS (frontend Vite en localhost)
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173"]
    cors_max_age: int = 3600

    # Rutas que no pasan por verificación de token (prefijos; "/" es exacta).
    # Las de auth dependen de api_prefix: ver `all_public_paths`.
    public_paths: Annotated[list[str], NoDecode] = ["/", "/health", "/ping", "/actuator"]

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "notepad_db"
    mongo_tls: bool = False
    mongo_tls_insecure: bool = False  # solo dev
    mongo_timeout_ms: int = 10000

    # Identidad (Firebase Authentication)
    firebase_service_account_key_b64: str | None = None
    firebase_project_id: str | None = None
    identity_timeout_seconds: int = 10
    identity_clock_skew_seconds: int = 60

    # Email
    mail_provider: Literal["sendgrid", "smtp"] = "sendgrid"
    sendgrid_api_key: str | None = None
    sendgrid_from_email: str | None = None
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    mail_timeout_seconds: int = 15
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from_email: str | None = None
    smtp_use_tls: bool = True

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
    )

    @field_validator("cors_origins", "public_paths", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> Any:
        """Acepta lista JSON o texto separado por comas."""
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                return json.loads(raw)
            return [p.strip() for p in raw.split(",") if p.strip()]
        return v

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def all_public_paths(self) -> list[str]:
        """`public_paths` más los endpoints públicos de auth bajo el prefijo actual."""
        pref = self.api_prefix_normalized
        return [*self.public_paths, f"{pref}/auth/verify-token", f"{pref}/auth/logout"]

    @cached_property
    def firebase_service_account(self) -> dict[str, Any] | None:
        """Decodifica el JSON de la cuenta de servicio (base64). None si falta o es inválido."""
        raw = (self.firebase_service_account_key_b64 or "").strip()
        if not raw:
            return None
        try:
            return json.loads(base64.b64decode(raw).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

    @property
    def firebase_project(self) -> str | None:
        """Project id de Firebase: override explícito o el de la cuenta de servicio."""
        if self.firebase_project_id:
            return self.firebase_project_id
        account = self.firebase_service_account or {}
        return account.get("project_id") or None

    @property
    def identity_configured(self) -> bool:
        return bool(self.firebase_project)

    @property
    def mail_configured(self) -> bool:
        if self.mail_provider == "smtp":
            return bool(self.smtp_host and (self.smtp_from_email or self.smtp_user))
        return bool(self.sendgrid_api_key and self.sendgrid_from_email)


settings = Settings()
