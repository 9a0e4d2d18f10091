"""
Capa de servicio para notas.

Cada operación recibe explícitamente el documento del usuario autenticado;
toda lectura y escritura queda acotada a ese usuario. Una nota inexistente y
una ajena se reportan igual: `NotFoundError`.
"""
import logging
from typing import Any, Dict, List, Optional

from notepad.core.exceptions import NotFoundError
from notepad.core.time import next_after, now_utc
from notepad.infrastructure.email import email_client
from notepad.repositories import note_repo as repo

_log = logging.getLogger("notepad.notes")

NOTE_NOT_FOUND = "Note not found"


def _require_title(title: Optional[str]) -> str:
    # El mensaje llega tal cual al cliente (400)
    if title is None or not title.strip():
        raise ValueError("Title is required")
    return title


def list_all(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return repo.list_notes(user["_id"])


def get_by_id(user: Dict[str, Any], note_id: str) -> Dict[str, Any]:
    note = repo.find_note(user["_id"], note_id)
    if note is None:
        raise NotFoundError(NOTE_NOT_FOUND)
    return note


def create(
    user: Dict[str, Any],
    title: str,
    content: Optional[str] = None,
    favorite: Optional[bool] = None,
) -> Dict[str, Any]:
    note = repo.insert_note(
        user["_id"],
        title=_require_title(title),
        content=content or "",
        is_favorite=bool(favorite) if favorite is not None else False,
        now=now_utc(),
    )
    _log.info("Nota creada id=%s user=%s", note["_id"], user.get("email"))
    return note


def update(
    user: Dict[str, Any],
    note_id: str,
    title: str,
    content: Optional[str] = None,
    favorite: Optional[bool] = None,
) -> Dict[str, Any]:
    """Sobrescribe título/contenido (y favorito si viene); updated_at siempre avanza."""
    title = _require_title(title)
    current = repo.find_note(user["_id"], note_id)
    if current is None:
        raise NotFoundError(NOTE_NOT_FOUND)

    fields: Dict[str, Any] = {
        "title": title,
        "content": content or "",
        "updated_at": next_after(current.get("updated_at")),
    }
    if favorite is not None:
        fields["is_favorite"] = favorite
    # El filtro id + dueño se reevalúa en la escritura: si la nota se borró
    # entre medias, no se resucita
    note = repo.update_note(user["_id"], note_id, fields)
    if note is None:
        raise NotFoundError(NOTE_NOT_FOUND)
    return note


def delete(user: Dict[str, Any], note_id: str) -> None:
    if not repo.delete_note(user["_id"], note_id):
        raise NotFoundError(NOTE_NOT_FOUND)
    _log.info("Nota eliminada id=%s user=%s", note_id, user.get("email"))


def search(user: Dict[str, Any], keyword: Optional[str]) -> List[Dict[str, Any]]:
    """Búsqueda case-insensitive en título o contenido. Keyword vacía: sin resultados."""
    keyword = (keyword or "").strip()
    if not keyword:
        return []
    return repo.search_notes(user["_id"], keyword)


def list_favorites(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return repo.list_notes(user["_id"], favorite=True)


def stats(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "user_email": user.get("email"),
        "total_notes": repo.count_notes(user["_id"]),
        "favorite_notes": repo.count_notes(user["_id"], favorite=True),
    }


def send_by_email(user: Dict[str, Any], note_id: str, recipient: str) -> Dict[str, Any]:
    """
    Envía la nota por correo. La nota se busca antes de tocar el mailer: una
    nota ajena o inexistente nunca genera un intento de entrega.
    """
    note = get_by_id(user, note_id)
    email_client.send_note_email(recipient, note["title"], note.get("content") or "")
    _log.info("Nota id=%s enviada a %s", note["_id"], recipient)
    return {
        "message": f"Note sent successfully to {recipient}",
        "note_id": str(note["_id"]),
        "note_title": note["title"],
        "sent_to": recipient,
    }
