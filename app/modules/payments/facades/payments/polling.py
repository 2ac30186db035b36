# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/polling.py

Espera acotada a que un pago llegue a un estado terminal.

Se detiene en el primer estado terminal, al agotar los intentos o al
alcanzar el techo de tiempo; en los dos últimos casos devuelve el
último estado observado.

Autor: ReelPass
Fecha: 18/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.models.payment_models import Payment
from app.modules.payments.services.payment_service import PaymentService

logger = logging.getLogger(__name__)


@dataclass
class PollResult:
    payment: Payment
    attempts: int
    timed_out: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.payment.status.is_terminal


async def wait_for_terminal_status(
    session: AsyncSession,
    payment_id: int,
    user_id: str,
    *,
    max_attempts: int = 10,
    interval_s: float = 2.0,
    timeout_s: float = 30.0,
    payment_service: PaymentService | None = None,
) -> PollResult:
    """
    Relee el pago hasta verlo terminal.

    Raises:
        NotFoundError: si el pago no existe o no es del usuario.
    """
    payment_service = payment_service or PaymentService()
    payment = await payment_service.get_payment_for_user(session, payment_id, user_id)
    attempts = 1

    try:
        async with asyncio.timeout(timeout_s):
            while not payment.status.is_terminal and attempts < max_attempts:
                # Cierra la transacción de lectura para ver commits de otros procesos
                if session.in_transaction():
                    await session.commit()
                await asyncio.sleep(interval_s)
                payment = await payment_service.get_payment_for_user(session, payment_id, user_id)
                attempts += 1
    except TimeoutError:
        logger.info("Polling for payment %s hit the %.1fs ceiling", payment_id, timeout_s)
        return PollResult(payment=payment, attempts=attempts, timed_out=True)

    return PollResult(payment=payment, attempts=attempts)


__all__ = ["PollResult", "wait_for_terminal_status"]

# Fin del archivo app/modules/payments/facades/payments/polling.py
