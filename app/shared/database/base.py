# -*- coding: utf-8 -*-
"""
app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- as_db_enum: mapea enums Python a ENUM nativo (PostgreSQL) o VARCHAR (SQLite)
- BigIntPK / JSONDocument / UTCDateTime: tipos portables PostgreSQL/SQLite

Autor: ReelPass
Fecha: 03/09/2026
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Type

from sqlalchemy import JSON, BigInteger, DateTime, Integer, MetaData
from sqlalchemy.types import TypeDecorator
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# BIGSERIAL en PostgreSQL; INTEGER en SQLite (único tipo con autoincrement)
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")

# JSONB en PostgreSQL; JSON genérico en el resto
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class UTCDateTime(TypeDecorator):
    """
    DateTime que siempre entrega valores UTC timezone-aware.

    SQLite no conserva la zona horaria; se normaliza a UTC al escribir
    y se re-etiqueta como UTC al leer.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ===== HELPER GENÉRICO PARA ENUMS =====
def as_db_enum(
    enum_cls: Type[Enum],
    name: str | None = None,
) -> SAEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy basado en un Enum de Python.

    Uso típico:

        class Payment(Base):
            status: Mapped[PaymentStatus] = mapped_column(
                as_db_enum(PaymentStatus),
                nullable=False,
            )

    - Persiste el `value` del enum (no el nombre del miembro).
    - En PostgreSQL se emite como ENUM nativo con nombre `__pg_enum_name__`.
    - En SQLite se emite como VARCHAR sin CHECK.
    """
    enum_name = name or getattr(enum_cls, "__pg_enum_name__", enum_cls.__name__.lower())

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return SAEnum(
        enum_cls,
        name=enum_name,
        native_enum=True,
        create_constraint=False,
        validate_strings=True,
        values_callable=_values,
    )


__all__ = ["Base", "NAMING_CONVENTION", "as_db_enum", "BigIntPK", "JSONDocument", "UTCDateTime"]

# Fin del archivo app/shared/database/base.py
