# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/status.py

Consulta del estado de un pago para su dueño (GET /payments/{id}).

Incluye el entitlement otorgado (rental_id / purchase_id) y, si se pide,
el estado que reporta la pasarela. La verificación con la pasarela es
solo informativa: no cambia el estado del pago, eso lo hace el webhook.

Autor: ReelPass
Fecha: 18/09/2026
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.repositories.purchase_repository import PurchaseRepository
from app.modules.entitlements.repositories.rental_repository import RentalRepository
from app.modules.payments.adapters.gateway_client import GatewayClient, get_gateway_client
from app.modules.payments.enums import PaymentProvider, PaymentPurpose
from app.modules.payments.errors import UpstreamError
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.schemas.payment_schemas import PaymentStatusOut
from app.modules.payments.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

GATEWAY_STATUS_UNAVAILABLE = "unavailable"


async def build_payment_status(
    session: AsyncSession,
    payment: Payment,
    *,
    rental_repo: Optional[RentalRepository] = None,
    purchase_repo: Optional[PurchaseRepository] = None,
    gateway_status: Optional[str] = None,
) -> PaymentStatusOut:
    rental_id = purchase_id = None
    match payment.purpose:
        case PaymentPurpose.RENTAL:
            rental = await (rental_repo or RentalRepository()).get_by_payment(session, payment.id)
            rental_id = rental.id if rental else None
        case PaymentPurpose.PURCHASE:
            purchase = await (purchase_repo or PurchaseRepository()).get_by_payment(session, payment.id)
            purchase_id = purchase.id if purchase else None
        case PaymentPurpose.WALLET_TOPUP | PaymentPurpose.SUBSCRIPTION:
            pass

    out = PaymentStatusOut.model_validate(payment)
    return out.model_copy(
        update={
            "is_terminal": payment.status.is_terminal,
            "rental_id": rental_id,
            "purchase_id": purchase_id,
            "gateway_status": gateway_status,
        }
    )


async def get_payment_status(
    session: AsyncSession,
    *,
    payment_id: int,
    user_id: str,
    verify: bool = False,
    payment_service: Optional[PaymentService] = None,
    gateway: Optional[GatewayClient] = None,
) -> PaymentStatusOut:
    """
    Estado del pago del usuario.

    Raises:
        NotFoundError: si no existe o pertenece a otro usuario.
    """
    payment_service = payment_service or PaymentService()
    payment = await payment_service.get_payment_for_user(session, payment_id, user_id)

    gateway_status = None
    if verify and payment.provider == PaymentProvider.GATEWAY and payment.provider_reference:
        try:
            result = await (gateway or get_gateway_client()).verify_transaction(payment.provider_reference)
            gateway_status = result.status
        except UpstreamError as e:
            logger.warning("Gateway verify failed for payment %s: %s", payment_id, e.message)
            gateway_status = GATEWAY_STATUS_UNAVAILABLE

    return await build_payment_status(session, payment, gateway_status=gateway_status)


__all__ = ["GATEWAY_STATUS_UNAVAILABLE", "build_payment_status", "get_payment_status"]

# Fin del archivo app/modules/payments/facades/payments/status.py
