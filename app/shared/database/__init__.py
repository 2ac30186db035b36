# -*- coding: utf-8 -*-
"""
app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: ReelPass
Fecha: 03/09/2026
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, BigIntPK, JSONDocument, UTCDateTime, as_db_enum
from .database import (
    engine,
    SessionLocal,
    get_async_session,
    session_scope,
    init_models,
    check_database_health,
)
from .repository import BaseRepository

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "NAMING_CONVENTION",
    "BigIntPK",
    "JSONDocument",
    "UTCDateTime",
    "as_db_enum",
    "BaseRepository",
    "get_async_session",
    "session_scope",
    "init_models",
    "check_database_health",
]

# Fin del archivo app/shared/database/__init__.py
