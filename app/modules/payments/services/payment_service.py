# -*- coding: utf-8 -*-
"""
app/modules/payments/services/payment_service.py

Servicio de bajo nivel para el ciclo de vida de un pago.

Flujos cubiertos:
- Crear el registro de pago
- Transiciones guardadas por estado: pending, completed (claim), failed, refunded
- Lecturas por id, referencia de pasarela e idempotency key

Las transiciones nunca salen de un estado terminal: cada una es un
UPDATE condicionado y devuelve False si otro proceso llegó primero.

Autor: ReelPass
Fecha: 16/09/2026
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import (
    CLAIMABLE_PAYMENT_STATUSES,
    PaymentProvider,
    PaymentPurpose,
    PaymentStatus,
)
from app.modules.payments.errors import NotFoundError
from app.modules.payments.metrics.exporters.prometheus_exporter import (
    observe_needs_reconciliation,
    observe_payment_outcome,
    observe_payment_started,
)
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.utils.datetime_helpers import utcnow

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, payment_repo: Optional[PaymentRepository] = None) -> None:
        self.payment_repo = payment_repo or PaymentRepository()

    # ------------------------------------------------------------------ #
    # Lecturas
    # ------------------------------------------------------------------ #
    async def get_payment(self, session: AsyncSession, payment_id: int) -> Optional[Payment]:
        return await self.payment_repo.get(session, payment_id)

    async def get_payment_for_user(
        self,
        session: AsyncSession,
        payment_id: int,
        user_id: str,
    ) -> Payment:
        """Pago del usuario; 404 también si pertenece a otro usuario."""
        payment = await self.payment_repo.get(session, payment_id)
        if payment is None or payment.user_id != user_id:
            raise NotFoundError("Payment not found")
        return payment

    async def get_by_reference(self, session: AsyncSession, reference: str) -> Optional[Payment]:
        return await self.payment_repo.get_by_provider_reference(session, reference)

    async def get_by_idempotency_key(self, session: AsyncSession, key: str) -> Optional[Payment]:
        return await self.payment_repo.get_by_idempotency_key(session, key)

    # ------------------------------------------------------------------ #
    # Creación
    # ------------------------------------------------------------------ #
    async def create_payment(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        amount: int,
        currency: str,
        purpose: PaymentPurpose,
        provider: PaymentProvider,
        status: PaymentStatus,
        metadata: Dict[str, Any],
        email: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        provider_reference: Optional[str] = None,
    ) -> Payment:
        """
        Inserta el pago. Un idempotency_key repetido levanta IntegrityError
        desde el flush; el llamador decide si hace replay.
        """
        payment = await self.payment_repo.create(
            session,
            user_id=user_id,
            amount=amount,
            currency=currency,
            purpose=purpose,
            provider=provider,
            status=status,
            metadata_json=metadata,
            email=email,
            idempotency_key=idempotency_key,
            provider_reference=provider_reference,
        )
        observe_payment_started(provider.value, purpose.value)
        logger.info(
            "Payment %s created user=%s purpose=%s provider=%s amount=%s status=%s",
            payment.id,
            user_id,
            purpose.value,
            provider.value,
            amount,
            status.value,
        )
        return payment

    # ------------------------------------------------------------------ #
    # Transiciones
    # ------------------------------------------------------------------ #
    async def mark_pending(
        self,
        session: AsyncSession,
        payment: Payment,
        *,
        provider_reference: str,
        checkout_url: str,
    ) -> bool:
        """initiated → pending con la referencia y la URL de checkout."""
        return await self.payment_repo.transition(
            session,
            payment.id,
            from_statuses=[PaymentStatus.INITIATED],
            to_status=PaymentStatus.PENDING,
            provider_reference=provider_reference,
            checkout_url=checkout_url,
        )

    async def claim_completed(self, session: AsyncSession, payment: Payment) -> bool:
        """
        Reclama la transición a completed. Solo quien la gana ejecuta
        el fulfillment.
        """
        claimed = await self.payment_repo.transition(
            session,
            payment.id,
            from_statuses=CLAIMABLE_PAYMENT_STATUSES,
            to_status=PaymentStatus.COMPLETED,
            completed_at=utcnow(),
        )
        if not claimed:
            logger.info("Payment %s already terminal; completion skipped", payment.id)
        return claimed

    async def mark_failed(
        self,
        session: AsyncSession,
        payment: Payment,
        reason: str,
        *,
        needs_reconciliation: bool = False,
    ) -> bool:
        """Marca FAILED si el pago aún no es terminal."""
        failed = await self.payment_repo.transition(
            session,
            payment.id,
            from_statuses=CLAIMABLE_PAYMENT_STATUSES,
            to_status=PaymentStatus.FAILED,
            error_message=reason[:2000],
            needs_reconciliation=needs_reconciliation,
        )
        if failed:
            observe_payment_outcome(payment.provider.value, payment.purpose.value, PaymentStatus.FAILED.value)
            if needs_reconciliation:
                observe_needs_reconciliation(payment.purpose.value)
            logger.info("Payment %s marked failed: %s", payment.id, reason)
        return failed

    async def mark_refunded(
        self,
        session: AsyncSession,
        payment: Payment,
        *,
        amount: int,
        reason: str,
    ) -> bool:
        """completed → refunded. False si otro reembolso llegó primero."""
        return await self.payment_repo.transition(
            session,
            payment.id,
            from_statuses=[PaymentStatus.COMPLETED],
            to_status=PaymentStatus.REFUNDED,
            refunded_at=utcnow(),
            refunded_amount=amount,
            refund_reason=reason[:2000],
        )

    def record_completed(self, payment: Payment) -> None:
        observe_payment_outcome(payment.provider.value, payment.purpose.value, PaymentStatus.COMPLETED.value)

    def record_refunded(self, provider: PaymentProvider, purpose: PaymentPurpose) -> None:
        observe_payment_outcome(provider.value, purpose.value, PaymentStatus.REFUNDED.value)


__all__ = ["PaymentService"]

# Fin del archivo app/modules/payments/services/payment_service.py
