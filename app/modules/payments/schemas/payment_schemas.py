# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/payment_schemas.py

Esquemas de entrada/salida de pagos.

PaymentCreateIn acepta tipos laxos a propósito: la validación de monto,
propósito y email la hace la capa de validación (400 con la lista de
errores), no FastAPI (422).

Autor: ReelPass
Fecha: 09/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.payments.enums import (
    PaymentMethod,
    PaymentProvider,
    PaymentPurpose,
    PaymentStatus,
)
from app.modules.payments.schemas.metadata_schemas import PaymentMetadata


class PaymentCreateIn(BaseModel):
    """Body de POST /payments."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount: Any = Field(default=None, description="Monto en kobo (entero)")
    purpose: Any = Field(default=None, description="wallet_topup | rental | purchase | subscription")
    metadata: Any = Field(default=None, description="Payload según el propósito")
    email: Any = Field(default=None, description="Email del pagador")
    payment_method: Any = Field(
        default=None,
        alias="paymentMethod",
        description="wallet | card (default card)",
    )
    currency: Any = Field(default=None, description="Código ISO de moneda (default NGN)")


class PaymentRequest(BaseModel):
    """Solicitud de pago ya sanitizada y validada."""

    model_config = ConfigDict(frozen=True)

    amount: int
    purpose: PaymentPurpose
    payment_method: PaymentMethod
    email: str
    currency: str
    metadata: PaymentMetadata
    idempotency_key: Optional[str] = None


class PaymentResult(BaseModel):
    """Resultado de process_payment (también es la respuesta HTTP)."""

    success: bool
    payment_id: Optional[int] = None
    status: Optional[PaymentStatus] = None
    checkout_url: Optional[str] = None
    wallet_transaction_id: Optional[int] = None
    error: Optional[str] = None
    replayed: bool = False


class PaymentStatusOut(BaseModel):
    """Estado de un pago para GET /payments/{id}."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    amount: int
    currency: str
    purpose: PaymentPurpose
    provider: PaymentProvider
    status: PaymentStatus
    provider_reference: Optional[str] = None
    checkout_url: Optional[str] = None
    error_message: Optional[str] = None
    needs_reconciliation: bool = False
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    refunded_amount: Optional[int] = None
    is_terminal: bool = False
    rental_id: Optional[int] = None
    purchase_id: Optional[int] = None
    gateway_status: Optional[str] = Field(
        default=None,
        description="Estado reportado por la pasarela (solo con ?verify=true)",
    )


class PaymentRefundIn(BaseModel):
    """Body de POST /payments/{id}/refund (solo administradores)."""

    reason: str = Field(min_length=1, max_length=500)


class PaymentRefundOut(BaseModel):
    payment_id: int
    status: PaymentStatus
    refunded_amount: int = Field(description="Monto reembolsado en kobo.")
    currency: str
    wallet_transaction_id: Optional[int] = None
    gateway_refund_id: Optional[str] = None


__all__ = [
    "PaymentCreateIn",
    "PaymentRequest",
    "PaymentResult",
    "PaymentStatusOut",
    "PaymentRefundIn",
    "PaymentRefundOut",
]

# Fin del archivo app/modules/payments/schemas/payment_schemas.py
