# -*- coding: utf-8 -*-
"""
app/modules/payments/models/payment_models.py

Modelo ORM para la tabla payments.

Reglas:
- Un pago por idempotency_key (UNIQUE).
- Nunca se borra: es el rastro de auditoría de cada intento de cobro.
- Solo PaymentProcessor y el handler de webhooks lo mutan, y siempre
  con UPDATE condicionado al estado actual.

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, JSONDocument, UTCDateTime
from app.modules.payments.enums import (
    PaymentProvider,
    PaymentPurpose,
    PaymentStatus,
    TERMINAL_PAYMENT_STATUSES,
)
from app.modules.payments.utils.datetime_helpers import utcnow


class Payment(Base):
    """Intento de mover dinero con un propósito (renta, compra, recarga)."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
        doc="ID opaco del usuario emitido por el proveedor de auth.",
    )

    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Monto en unidades menores (kobo).",
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="NGN")

    purpose: Mapped[PaymentPurpose] = mapped_column(PaymentPurpose.as_db_enum(), nullable=False)

    provider: Mapped[PaymentProvider] = mapped_column(PaymentProvider.as_db_enum(), nullable=False)

    status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatus.as_db_enum(),
        nullable=False,
        index=True,
    )

    provider_reference: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        doc="Referencia de la transacción en la pasarela.",
    )

    idempotency_key: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
    )

    checkout_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # 👇 atributo distinto, la columna sigue siendo "metadata"
    metadata_json: Mapped[Dict[str, Any]] = mapped_column(
        "metadata",
        JSONDocument,
        nullable=False,
        default=dict,
        doc="Payload validado según el propósito (RentalMetadata, PurchaseMetadata...).",
    )

    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    needs_reconciliation: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        doc="Cobro confirmado sin entitlement: requiere revisión manual.",
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    # Reembolso administrativo (status=refunded)
    refunded_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    refunded_amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    refund_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        Index("ix_payments_user_id_created_at", "user_id", "created_at"),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_PAYMENT_STATUSES

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<Payment id={self.id} user_id={self.user_id} purpose={self.purpose} "
            f"amount={self.amount} status={self.status}>"
        )


__all__ = ["Payment"]

# Fin del archivo app/modules/payments/models/payment_models.py
