# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/payments.py

Rutas de pagos del usuario autenticado.

Endpoints:
- POST /payments                      → iniciar pago (wallet o pasarela)
- GET  /payments/{payment_id}         → estado (+ ?verify=true contra la pasarela)
- GET  /payments/{payment_id}/wait    → polling acotado hasta estado terminal
- POST /payments/{payment_id}/refund  → reembolso de un pago completado (admin)

Autor: ReelPass
Fecha: 19/09/2026
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import AuthenticatedUser, get_current_admin, get_current_user
from app.modules.payments.facades.payments import (
    PaymentProcessor,
    PaymentRefunder,
    build_payment_status,
    get_payment_status,
    wait_for_terminal_status,
)
from app.modules.payments.middleware import check_payment_rate_limit
from app.modules.payments.schemas import (
    PaymentCreateIn,
    PaymentRefundIn,
    PaymentRefundOut,
    PaymentResult,
    PaymentStatusOut,
)
from app.shared.config.settings_payments import get_payments_settings
from app.shared.database.database import get_async_session

router = APIRouter(tags=["payments"])


def get_payment_processor() -> PaymentProcessor:
    return PaymentProcessor()


def get_payment_refunder() -> PaymentRefunder:
    return PaymentRefunder()


@router.post(
    "",
    response_model=PaymentResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(check_payment_rate_limit)],
)
async def create_payment(
    payload: PaymentCreateIn,
    response: Response,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    processor: PaymentProcessor = Depends(get_payment_processor),
):
    """
    Inicia un pago.

    201 para un pago nuevo; 200 cuando la Idempotency-Key repite un pago existente.
    """
    result = await processor.process_payment(
        session,
        user.user_id,
        payload.model_dump(by_alias=True),
        idempotency_key=idempotency_key,
    )
    if result.replayed:
        response.status_code = status.HTTP_200_OK
    return result


@router.get("/{payment_id}", response_model=PaymentStatusOut)
async def get_payment(
    payment_id: int,
    verify: bool = Query(default=False, description="Consultar además el estado en la pasarela"),
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await get_payment_status(
        session,
        payment_id=payment_id,
        user_id=user.user_id,
        verify=verify,
    )


@router.get("/{payment_id}/wait", response_model=PaymentStatusOut)
async def wait_for_payment(
    payment_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Espera (acotada) a que el pago sea completed o failed."""
    settings = get_payments_settings()
    result = await wait_for_terminal_status(
        session,
        payment_id,
        user.user_id,
        max_attempts=settings.poll_max_attempts,
        interval_s=settings.poll_interval_seconds,
        timeout_s=settings.poll_timeout_seconds,
    )
    return await build_payment_status(session, result.payment)


@router.post(
    "/{payment_id}/refund",
    response_model=PaymentRefundOut,
    response_model_exclude_none=True,
    dependencies=[Depends(check_payment_rate_limit)],
)
async def refund_payment(
    payment_id: int,
    payload: PaymentRefundIn,
    admin: AuthenticatedUser = Depends(get_current_admin),
    session: AsyncSession = Depends(get_async_session),
    refunder: PaymentRefunder = Depends(get_payment_refunder),
):
    """
    Reembolsa un pago completado: revierte el efecto en la wallet, revoca
    el entitlement y, si se cobró por la pasarela, pide ahí el reembolso.
    """
    return await refunder.refund_payment(
        session,
        payment_id,
        reason=payload.reason,
        admin_id=admin.user_id,
    )


# Fin del archivo app/modules/payments/routes/payments.py
