"""
Utilidades de fecha/hora en UTC.

Mongo guarda fechas con resolución de milisegundos; sellamos los timestamps ya
truncados para que lo que devolvemos coincida con lo persistido.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

ONE_MS = timedelta(milliseconds=1)


def now_utc() -> datetime:
    """Ahora en UTC (aware), truncado a milisegundos."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def as_utc(dt: datetime) -> datetime:
    # Asegura timezone-aware en UTC (pymongo devuelve naive si tz_aware=False)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def next_after(previous: datetime | None) -> datetime:
    """Timestamp actual, garantizando que sea estrictamente mayor que `previous`."""
    now = now_utc()
    if previous is None:
        return now
    floor = as_utc(previous) + ONE_MS
    return now if now >= floor else floor
