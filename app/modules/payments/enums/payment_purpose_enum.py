# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_purpose_enum.py

Propósito de un pago. Cada propósito tiene su propio payload de metadata
y su propia rama de fulfillment.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum


class PaymentPurpose(StrEnum):
    WALLET_TOPUP = "wallet_topup"
    RENTAL = "rental"
    PURCHASE = "purchase"
    SUBSCRIPTION = "subscription"

    __pg_enum_name__ = "payment_purpose_enum"

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return as_db_enum(cls)


__all__ = ["PaymentPurpose"]
