"""Schemas para endpoints de health (sin auth)."""
from pydantic import BaseModel


class PingOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool
    database: bool


class RootOut(BaseModel):
    name: str
    status: str
