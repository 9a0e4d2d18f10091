"""Agregador de routers de la API (bajo `api_prefix`)."""
from fastapi import APIRouter
from notepad.api.routers import auth, notes

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(notes.router)
