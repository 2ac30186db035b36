# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_provider_enum.py

Origen de los fondos de un pago.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum


class PaymentProvider(StrEnum):
    """Quién mueve el dinero: la wallet interna o la pasarela externa."""

    WALLET = "wallet"
    GATEWAY = "gateway"

    __pg_enum_name__ = "payment_provider_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return as_db_enum(cls)


__all__ = ["PaymentProvider"]
