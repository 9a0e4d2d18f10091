"""
Endpoints de notas del usuario autenticado.

Todas las rutas exigen identidad (401 si falta) y operan sólo sobre notas del
propio usuario; una nota ajena responde igual que una inexistente (404).
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import EmailStr

from notepad.api.deps import get_current_user
from notepad.api.schemas.note import NoteOut, NoteRequest, NoteSentOut, NoteStatsOut
from notepad.services import note_service as service

router = APIRouter(prefix="/notes", tags=["Notes"])


def _out(notes: List[Dict[str, Any]], user: Dict[str, Any]) -> List[NoteOut]:
    return [NoteOut.from_doc(n, user) for n in notes]


@router.get("", response_model=List[NoteOut], summary="Listar notas")
def list_notes(user=Depends(get_current_user)):
    return _out(service.list_all(user), user)


@router.get(
    "/search",
    response_model=List[NoteOut],
    summary="Buscar notas",
    description="Subcadena case-insensitive en título o contenido. Keyword vacía no devuelve resultados.",
)
def search_notes(keyword: str = Query(""), user=Depends(get_current_user)):
    return _out(service.search(user, keyword), user)


@router.get("/favorites", response_model=List[NoteOut], summary="Listar favoritas")
def favorite_notes(user=Depends(get_current_user)):
    return _out(service.list_favorites(user), user)


@router.get("/stats", response_model=NoteStatsOut, summary="Estadísticas del usuario")
def note_stats(user=Depends(get_current_user)):
    return NoteStatsOut(**service.stats(user))


@router.get("/{note_id}", response_model=NoteOut, summary="Obtener nota")
def get_note(note_id: str, user=Depends(get_current_user)):
    return NoteOut.from_doc(service.get_by_id(user, note_id), user)


@router.post("", response_model=NoteOut, status_code=status.HTTP_201_CREATED, summary="Crear nota")
def create_note(payload: NoteRequest, user=Depends(get_current_user)):
    try:
        note = service.create(user, payload.title, payload.content, payload.is_favorite)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteOut.from_doc(note, user)


@router.put("/{note_id}", response_model=NoteOut, summary="Actualizar nota")
def update_note(note_id: str, payload: NoteRequest, user=Depends(get_current_user)):
    try:
        note = service.update(user, note_id, payload.title, payload.content, payload.is_favorite)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteOut.from_doc(note, user)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Eliminar nota")
def delete_note(note_id: str, user=Depends(get_current_user)):
    service.delete(user, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{note_id}/send-email",
    response_model=NoteSentOut,
    summary="Enviar nota por correo",
    description="Envía título y contenido de la nota al correo indicado. 500 con cuerpo propio si falla la entrega.",
)
def send_note_email(note_id: str, email: EmailStr = Query(...), user=Depends(get_current_user)):
    return NoteSentOut(**service.send_by_email(user, note_id, str(email)))
