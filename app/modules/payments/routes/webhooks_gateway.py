# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/webhooks_gateway.py

Webhook de la pasarela.

Endpoint:
- POST /payments/webhooks/gateway

La firma se calcula sobre el body crudo: la ruta lee request.body()
sin pasar por un modelo pydantic.

Autor: ReelPass
Fecha: 19/09/2026
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.facades.webhooks import handle_gateway_webhook
from app.modules.payments.middleware import check_webhook_rate_limit
from app.modules.payments.schemas import WebhookAck
from app.shared.config.settings_payments import get_payments_settings
from app.shared.database.database import get_async_session
from app.shared.http_utils.request_meta import get_client_ip

router = APIRouter(
    prefix="/webhooks",
    tags=["payments:webhooks"],
)


@router.post(
    "/gateway",
    response_model=WebhookAck,
    response_model_exclude_none=True,
    dependencies=[Depends(check_webhook_rate_limit)],
)
async def gateway_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
):
    raw_body = await request.body()
    signature = request.headers.get(get_payments_settings().webhook_signature_header)
    return await handle_gateway_webhook(
        session,
        raw_body,
        signature,
        get_client_ip(request),
    )


# Fin del archivo app/modules/payments/routes/webhooks_gateway.py
