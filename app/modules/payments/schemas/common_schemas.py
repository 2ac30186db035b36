# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/common_schemas.py

Esquemas comunes (metadatos de paginación) para el módulo Payments.

Autor: ReelPass
Fecha: 09/09/2026
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PageMeta(BaseModel):
    """Metadatos de paginación para respuestas con listas."""

    total: int = Field(ge=0, description="Número total de registros.")
    limit: int = Field(ge=1, description="Límite de registros por página.")
    offset: int = Field(ge=0, description="Offset actual de la consulta.")

    @classmethod
    def build(cls, *, total: int, limit: int, offset: int) -> "PageMeta":
        return cls(total=total, limit=limit, offset=offset)


__all__ = ["PageMeta"]

# Fin del archivo app/modules/payments/schemas/common_schemas.py
