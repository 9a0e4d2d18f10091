"""
Esquemas Pydantic para los endpoints de autenticación.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from notepad.api.schemas.note import CamelModel
from notepad.core.time import as_utc


class VerifyTokenOut(CamelModel):
    valid: bool = True
    uid: str
    email: str
    name: Optional[str] = None
    user_id: str


class UserOut(CamelModel):
    """Respuesta pública de usuario."""
    id: str
    firebase_uid: Optional[str] = None
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, user: Dict[str, Any]) -> "UserOut":
        return cls(
            id=str(user["_id"]),
            firebase_uid=user.get("firebase_uid"),
            email=user["email"],
            name=user.get("name"),
            created_at=as_utc(user["created_at"]) if user.get("created_at") else None,
        )


class MessageOut(CamelModel):
    message: str
