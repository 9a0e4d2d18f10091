"""
Esquemas Pydantic para `note`.

Convenciones:
- Atributos en snake_case; JSON en camelCase (alias), como espera el frontend.
- Timestamps en UTC.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from notepad.core.time import as_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoteRequest(CamelModel):
    """Cuerpo de creación/actualización: {title, content, isFavorite?}."""
    title: str = Field(..., max_length=255)
    content: str = ""
    is_favorite: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Title is required")
        return v

    @field_validator("content", mode="before")
    @classmethod
    def _content_default(cls, v: Any) -> Any:
        return "" if v is None else v


class NoteOut(CamelModel):
    id: str
    title: str
    content: str
    is_favorite: bool
    created_at: datetime
    updated_at: datetime
    user_id: str
    user_email: Optional[str] = None

    @classmethod
    def from_doc(cls, note: Dict[str, Any], user: Dict[str, Any]) -> "NoteOut":
        return cls(
            id=str(note["_id"]),
            title=note["title"],
            content=note.get("content") or "",
            is_favorite=bool(note.get("is_favorite")),
            created_at=as_utc(note["created_at"]),
            updated_at=as_utc(note["updated_at"]),
            user_id=str(note["user_id"]),
            user_email=user.get("email"),
        )


class NoteStatsOut(CamelModel):
    user_email: Optional[str] = None
    total_notes: int
    favorite_notes: int


class NoteSentOut(CamelModel):
    message: str
    note_id: str
    note_title: str
    sent_to: str
