# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_status_enum.py

Estados del pago.

Pasarela: initiated → pending → completed | failed
Wallet:   processing → completed | failed
Reembolso (admin): completed → refunded

failed y refunded son finales. completed es terminal para el cobro:
solo el reembolso administrativo sale de él.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum


class PaymentStatus(StrEnum):
    """Estado del pago en su ciclo de vida."""

    INITIATED = "initiated"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    __pg_enum_name__ = "payment_status_enum"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_PAYMENT_STATUSES

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return as_db_enum(cls)


TERMINAL_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.REFUNDED}
)

# Estados desde los que se puede reclamar la transición a completed
CLAIMABLE_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.INITIATED, PaymentStatus.PENDING, PaymentStatus.PROCESSING}
)

__all__ = ["PaymentStatus", "TERMINAL_PAYMENT_STATUSES", "CLAIMABLE_PAYMENT_STATUSES"]
