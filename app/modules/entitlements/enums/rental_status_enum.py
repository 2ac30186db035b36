# -*- coding: utf-8 -*-
"""
app/modules/entitlements/enums/rental_status_enum.py

Estado de una renta. `expired` lo asigna el job periódico; el resolver
no depende de él (compara expiration_date contra now). `revoked` lo
asigna el reembolso del pago que la otorgó.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum


class RentalStatus(StrEnum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"

    __pg_enum_name__ = "rental_status_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return as_db_enum(cls)


__all__ = ["RentalStatus"]
