# -*- coding: utf-8 -*-
"""
app/modules/payments/utils/datetime_helpers.py

Utilidades para timestamps UTC consistentes.

Autor: ReelPass
Fecha: 06/09/2026
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Timestamp UTC actual (timezone-aware).

    Examples:
        >>> utcnow().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Asegura que un datetime sea UTC timezone-aware.
    Los naive se interpretan como UTC.

    Examples:
        >>> ensure_utc(datetime(2026, 9, 1, 12, 0)).tzinfo == timezone.utc
        True
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    if dt.tzinfo != timezone.utc:
        return dt.astimezone(timezone.utc)
    return dt


def add_hours(dt: datetime, hours: int) -> datetime:
    return ensure_utc(dt) + timedelta(hours=hours)


def to_iso8601(dt: Optional[datetime]) -> Optional[str]:
    """ISO 8601 con sufijo Z, o None."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")
