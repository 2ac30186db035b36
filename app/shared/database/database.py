# -*- coding: utf-8 -*-
"""
app/shared/database/database.py

SQLAlchemy async: asyncpg en producción, aiosqlite en desarrollo/tests.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Dependencia FastAPI: get_async_session
- context manager: session_scope()
- init_models() para crear tablas en desarrollo
- check_database_health()

Autor: ReelPass
Fecha: 03/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.shared.config import get_settings
from app.shared.database.base import Base

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    """Parámetros del engine según el driver."""
    settings = get_settings()
    kwargs: Dict[str, Any] = {"echo": settings.db_echo_sql}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )
    return kwargs


def _enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """
    aiosqlite emite BEGIN por su cuenta y rompe SAVEPOINT (begin_nested).
    Se desactiva ese comportamiento y el BEGIN lo emite SQLAlchemy.

    BEGIN IMMEDIATE toma el lock de escritura al abrir la transacción:
    las transacciones concurrentes esperan su turno (busy timeout) en vez
    de fallar con "database is locked" al pasar de lectura a escritura.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str | None = None) -> AsyncEngine:
    """Crea un AsyncEngine para la URL dada (o la de settings)."""
    url = url or get_settings().database_url
    log_level = logger.debug if get_settings().db_echo_sql else logger.info
    log_level("[DB] Creando engine para %s", url.split("@")[-1])
    async_engine = create_async_engine(url, **_engine_kwargs(url))
    if url.startswith("sqlite"):
        _enable_sqlite_savepoints(async_engine)
    return async_engine


engine: AsyncEngine = build_engine()

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # Importante: rollback para liberar cualquier transacción/lock
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Context manager reutilizable en jobs/scripts
@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            # El commit lo decide quien usa el scope
        finally:
            if session.in_transaction():
                await session.rollback()


async def init_models(bind: AsyncEngine | None = None) -> None:
    """
    Crea las tablas declaradas en Base.metadata (solo desarrollo/tests;
    en producción el esquema lo gestionan migraciones).
    """
    # Registrar todos los modelos en el metadata antes de create_all
    import app.modules.payments.models  # noqa: F401
    import app.modules.entitlements.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] Health check fallido: %s", e)
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "build_engine",
    "get_async_session",
    "session_scope",
    "init_models",
    "check_database_health",
]
# Fin del archivo app/shared/database/database.py
