# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/handler.py

Procesamiento de webhooks de la pasarela (POST /payments/webhooks/gateway).

1. Verifica la firma HMAC-SHA512 del body crudo
2. Parsea y normaliza el evento
3. Deduplica (caché en proceso / Redis, luego la fila durable)
4. Registra el evento y hace commit antes de despachar
5. Despacha por tipo de evento
6. Marca el evento como procesado y hace commit

El rate limit por IP se aplica antes, como dependencia de la ruta.

Autor: ReelPass
Fecha: 18/09/2026
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.services.fulfillment_service import FulfillmentService
from app.modules.payments.enums import PaymentPurpose, WebhookEventType
from app.modules.payments.errors import AuthError, ValidationError
from app.modules.payments.facades.payments.completion import complete_payment
from app.modules.payments.facades.webhooks.normalize import (
    GatewayWebhook,
    WebhookPayloadError,
    parse_gateway_payload,
)
from app.modules.payments.metrics.exporters.prometheus_exporter import (
    observe_amount_mismatch,
    observe_webhook_outcome,
    observe_webhook_received,
    observe_webhook_rejected,
)
from app.modules.payments.schemas.webhook_schemas import WebhookAck
from app.modules.payments.services.payment_service import PaymentService
from app.modules.payments.services.webhook_event_service import WebhookEventService
from app.modules.payments.services.webhooks.event_dedup import (
    ProcessedEventCache,
    get_processed_event_cache,
)
from app.modules.payments.services.webhooks.signature_verification import verify_gateway_signature
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

logger = logging.getLogger(__name__)

PROVIDER = "gateway"

# Estados de procesamiento guardados en webhook_events.processing_status
STATUS_PROCESSED = "processed"
STATUS_IGNORED = "ignored"
STATUS_NOT_FOUND = "payment_not_found"
STATUS_FULFILLMENT_FAILED = "fulfillment_failed"
STATUS_ACKNOWLEDGED = "acknowledged"

DUPLICATE_EVENT = "duplicate_event"


class GatewayWebhookHandler:
    def __init__(
        self,
        *,
        settings: Optional[PaymentsSettings] = None,
        cache: Optional[ProcessedEventCache] = None,
        event_service: Optional[WebhookEventService] = None,
        payment_service: Optional[PaymentService] = None,
        fulfillment: Optional[FulfillmentService] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self.cache = cache or get_processed_event_cache()
        self.event_service = event_service or WebhookEventService()
        self.payment_service = payment_service or PaymentService()
        self.fulfillment = fulfillment or FulfillmentService(settings=self.settings)

    async def handle(
        self,
        session: AsyncSession,
        raw_body: bytes,
        signature: Optional[str],
        client_ip: Optional[str],
    ) -> WebhookAck:
        """
        Raises:
            AuthError: firma ausente o inválida (sin escrituras).
            ValidationError: body no parseable.
        """
        started = time.perf_counter()
        observe_webhook_received(PROVIDER)

        secret = self.settings.gateway_secret_key.get_secret_value()
        if not verify_gateway_signature(raw_body, signature, secret):
            logger.warning("Invalid webhook signature from IP %s", client_ip)
            observe_webhook_rejected(PROVIDER, "invalid_signature")
            raise AuthError("Invalid signature", context={"client_ip": client_ip})

        try:
            webhook = parse_gateway_payload(raw_body)
        except WebhookPayloadError as e:
            logger.warning("Malformed webhook from IP %s: %s", client_ip, e)
            observe_webhook_rejected(PROVIDER, "malformed_payload")
            raise ValidationError(str(e)) from e

        # Fast path: evento ya procesado por este proceso o por otra réplica
        if await self.cache.contains(webhook.event_key):
            return self._duplicate(webhook, started)

        event, created = await self.event_service.register_event(
            session,
            event_key=webhook.event_key,
            event_type=webhook.event_type[:64],
            payload=webhook.payload,
            provider=PROVIDER,
            provider_event_id=webhook.event_id,
            provider_reference=webhook.reference,
            client_ip=client_ip,
        )
        if not created and event.processed_at is not None:
            await self.cache.add(webhook.event_key)
            return self._duplicate(webhook, started)
        await session.commit()

        try:
            processing_status, message = await self._dispatch(session, webhook)
            await self.event_service.mark_processed(
                session,
                event,
                processing_status=processing_status,
                processing_message=message,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception(
                "Webhook dispatch failed event_key=%s; left unprocessed for retry",
                webhook.event_key,
            )
            observe_webhook_outcome(PROVIDER, "error", time.perf_counter() - started)
            raise

        await self.cache.add(webhook.event_key)
        observe_webhook_outcome(PROVIDER, processing_status, time.perf_counter() - started)
        logger.info(
            "Webhook %s processed: status=%s message=%s",
            webhook.event_key,
            processing_status,
            message,
        )
        return WebhookAck(status="success", message=message, event_key=webhook.event_key)

    def _duplicate(self, webhook: GatewayWebhook, started: float) -> WebhookAck:
        logger.info("Duplicate webhook ignored: %s", webhook.event_key)
        observe_webhook_outcome(PROVIDER, DUPLICATE_EVENT, time.perf_counter() - started)
        return WebhookAck(
            status=DUPLICATE_EVENT,
            message="Event already processed",
            event_key=webhook.event_key,
        )

    # ------------------------------------------------------------------ #
    # Despacho por tipo de evento
    # ------------------------------------------------------------------ #
    async def _dispatch(self, session: AsyncSession, webhook: GatewayWebhook) -> Tuple[str, str]:
        match webhook.event:
            case WebhookEventType.CHARGE_SUCCESS:
                return await self._on_charge_success(session, webhook)
            case WebhookEventType.CHARGE_FAILED:
                return await self._on_charge_failed(session, webhook)
            case WebhookEventType.TRANSFER_SUCCESS:
                logger.info("Transfer succeeded reference=%s", webhook.reference)
                return STATUS_ACKNOWLEDGED, "Transfer processed successfully"
            case WebhookEventType.TRANSFER_FAILED:
                logger.warning("Transfer failed reference=%s", webhook.reference)
                return STATUS_ACKNOWLEDGED, "Failed transfer processed"
            case None:
                logger.info("Unhandled webhook event type %s", webhook.event_type)
                return STATUS_ACKNOWLEDGED, "Event acknowledged but not processed"

    async def _on_charge_success(self, session: AsyncSession, webhook: GatewayWebhook) -> Tuple[str, str]:
        payment = None
        if webhook.reference:
            payment = await self.payment_service.get_by_reference(session, webhook.reference)
        if payment is None:
            logger.warning("charge.success for unknown reference %s", webhook.reference)
            return STATUS_NOT_FOUND, "Payment not found for reference"

        if webhook.amount is not None and webhook.amount != payment.amount:
            logger.warning(
                "Amount mismatch for payment %s: expected=%s received=%s",
                payment.id,
                payment.amount,
                webhook.amount,
            )
            observe_amount_mismatch(PROVIDER)

        confirmed_amount = None
        if payment.purpose == PaymentPurpose.WALLET_TOPUP:
            confirmed_amount = webhook.amount if webhook.amount is not None else payment.amount

        result = await complete_payment(
            session,
            payment,
            payment_service=self.payment_service,
            fulfillment=self.fulfillment,
            confirmed_amount=confirmed_amount,
        )
        if result.completed:
            return STATUS_PROCESSED, "Charge processed successfully"
        if result.already_terminal:
            return STATUS_IGNORED, "Payment already finalized"
        return STATUS_FULFILLMENT_FAILED, result.error or "Fulfillment failed"

    async def _on_charge_failed(self, session: AsyncSession, webhook: GatewayWebhook) -> Tuple[str, str]:
        payment = None
        if webhook.reference:
            payment = await self.payment_service.get_by_reference(session, webhook.reference)
        if payment is None:
            logger.warning("charge.failed for unknown reference %s", webhook.reference)
            return STATUS_NOT_FOUND, "Payment not found for reference"

        reason = webhook.gateway_response or "Payment failed"
        if await self.payment_service.mark_failed(session, payment, reason):
            return STATUS_PROCESSED, "Failed charge processed"
        return STATUS_IGNORED, "Payment already finalized"


async def handle_gateway_webhook(
    session: AsyncSession,
    raw_body: bytes,
    signature: Optional[str],
    client_ip: Optional[str],
) -> WebhookAck:
    """Función de alto nivel para procesar webhooks desde rutas HTTP."""
    return await GatewayWebhookHandler().handle(session, raw_body, signature, client_ip)


__all__ = [
    "DUPLICATE_EVENT",
    "GatewayWebhookHandler",
    "handle_gateway_webhook",
]

# Fin del archivo app/modules/payments/facades/webhooks/handler.py
