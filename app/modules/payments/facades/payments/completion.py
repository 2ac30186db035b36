# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/completion.py

Cierre de un pago: reclamar `completed` y ejecutar el fulfillment.

El UPDATE condicionado de claim_completed es el único punto de entrada
al fulfillment; dos webhooks duplicados (o un webhook y un reintento)
no pueden otorgar dos veces lo mismo.

Autor: ReelPass
Fecha: 17/09/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.services.fulfillment_service import (
    FulfillmentOutcome,
    FulfillmentService,
)
from app.modules.payments.enums import PaymentProvider
from app.modules.payments.errors import FulfillmentError
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.services.payment_service import PaymentService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionResult:
    """Resultado de complete_payment."""

    payment_id: int
    completed: bool
    outcome: Optional[FulfillmentOutcome] = None
    already_terminal: bool = False
    error: Optional[str] = None


async def claim_and_fulfill(
    session: AsyncSession,
    payment: Payment,
    *,
    payment_service: PaymentService,
    fulfillment: FulfillmentService,
    confirmed_amount: Optional[int] = None,
) -> Optional[FulfillmentOutcome]:
    """
    Reclama la transición a completed y, si se gana, ejecuta el fulfillment.

    No abre savepoint: quien llama define la unidad atómica (el camino
    wallet incluye el débito en la misma).

    Returns:
        FulfillmentOutcome, o None si el pago ya era terminal.

    Raises:
        FulfillmentError
    """
    if not await payment_service.claim_completed(session, payment):
        return None
    return await fulfillment.fulfill(session, payment, confirmed_amount=confirmed_amount)


async def complete_payment(
    session: AsyncSession,
    payment: Payment,
    *,
    payment_service: Optional[PaymentService] = None,
    fulfillment: Optional[FulfillmentService] = None,
    confirmed_amount: Optional[int] = None,
) -> CompletionResult:
    """
    Completa un pago de pasarela confirmado por webhook.

    Si el fulfillment falla se revierte su savepoint (incluida la
    transición) y el pago queda failed con needs_reconciliation: el
    dinero ya fue capturado por la pasarela.
    """
    payment_service = payment_service or PaymentService()
    fulfillment = fulfillment or FulfillmentService()

    # Valores planos: el rollback del savepoint puede expirar el objeto
    payment_id = payment.id
    purpose = payment.purpose
    provider = payment.provider
    amount = payment.amount

    try:
        async with session.begin_nested():
            outcome = await claim_and_fulfill(
                session,
                payment,
                payment_service=payment_service,
                fulfillment=fulfillment,
                confirmed_amount=confirmed_amount,
            )
    except FulfillmentError as e:
        logger.error(
            "Fulfillment failed payment_id=%s purpose=%s amount=%s: %s",
            payment_id,
            purpose.value,
            amount,
            e.message,
        )
        payment = await payment_service.get_payment(session, payment_id)
        await payment_service.mark_failed(
            session,
            payment,
            e.message,
            needs_reconciliation=provider == PaymentProvider.GATEWAY,
        )
        return CompletionResult(payment_id=payment_id, completed=False, error=e.message)

    if outcome is None:
        return CompletionResult(payment_id=payment_id, completed=False, already_terminal=True)

    payment_service.record_completed(payment)
    logger.info(
        "Payment %s completed purpose=%s provider=%s amount=%s",
        payment_id,
        purpose.value,
        provider.value,
        amount,
    )
    return CompletionResult(payment_id=payment_id, completed=True, outcome=outcome)


__all__ = ["CompletionResult", "claim_and_fulfill", "complete_payment"]

# Fin del archivo app/modules/payments/facades/payments/completion.py
