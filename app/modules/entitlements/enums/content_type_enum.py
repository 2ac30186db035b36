# -*- coding: utf-8 -*-
"""
app/modules/entitlements/enums/content_type_enum.py

Tipos de contenido que se pueden rentar o comprar.

Temporadas y episodios son tipos distintos: cada uno tiene sus propias
rentas y compras; el acceso a un episodio se resuelve como la unión de
ambos.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum


class ContentType(StrEnum):
    MOVIE = "movie"
    SEASON = "season"
    EPISODE = "episode"

    __pg_enum_name__ = "content_type_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return as_db_enum(cls)


__all__ = ["ContentType"]
