# tests/modules/payments/facades/webhooks/test_gateway_webhook_handler.py
# -*- coding: utf-8 -*-
"""
Suite: GatewayWebhookHandler
Objetivo:
  - Firma inválida: AuthError y ninguna escritura
  - Firma alterada en un solo carácter: AuthError y ninguna escritura
  - charge.success completa el pago y ejecuta el fulfillment una sola vez
  - Reintentos del mismo evento: duplicate_event (caché y tabla webhook_events)
  - Entregas concurrentes del mismo charge.success: un solo crédito
  - charge.failed marca failed; nunca revierte un completed
  - Referencia desconocida y tipos no soportados: acuse sin efectos
"""

import asyncio

import pytest
from sqlalchemy import func, select

from app.modules.payments.enums import PaymentProvider, PaymentPurpose, PaymentStatus, WalletTxType
from app.modules.payments.errors import AuthError, ValidationError
from app.modules.payments.facades.webhooks import GatewayWebhookHandler
from app.modules.payments.models import WalletTransaction, WebhookEvent
from app.modules.payments.services import PaymentService, WalletService, WebhookEventService
from app.modules.payments.services.webhooks.event_dedup import ProcessedEventCache

USER = "user-hook"


@pytest.fixture
def handler():
    return GatewayWebhookHandler(cache=ProcessedEventCache(max_entries=100))


async def _pending_payment(session, *, purpose=PaymentPurpose.WALLET_TOPUP, amount=500_000, metadata=None, reference="ref-hook-1"):
    service = PaymentService()
    payment = await service.create_payment(
        session,
        user_id=USER,
        amount=amount,
        currency="NGN",
        purpose=purpose,
        provider=PaymentProvider.GATEWAY,
        status=PaymentStatus.INITIATED,
        metadata=metadata or {},
        idempotency_key=reference,
        provider_reference=reference,
    )
    await service.mark_pending(session, payment, provider_reference=reference, checkout_url="https://c/x")
    await session.commit()
    return payment


async def _event_count(session):
    return (await session.execute(select(func.count(WebhookEvent.id)))).scalar_one()


async def test_invalid_signature_raises_without_writes(db_session, handler, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    body = webhook_body("charge.success", "ref-hook-1", amount=500_000)
    signature = webhook_signature(body)
    tampered = webhook_body("charge.success", "ref-hook-1", amount=50_000_000)

    with pytest.raises(AuthError):
        await handler.handle(db_session, tampered, signature, "10.0.0.1")
    with pytest.raises(AuthError):
        await handler.handle(db_session, body, None, "10.0.0.1")

    assert await _event_count(db_session) == 0
    payment = await PaymentService().get_by_reference(db_session, "ref-hook-1")
    assert payment.status == PaymentStatus.PENDING


async def test_signature_altered_by_one_character_is_rejected(db_session, handler, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    body = webhook_body("charge.success", "ref-hook-1", amount=500_000)
    signature = webhook_signature(body)
    altered = signature[:-1] + ("0" if signature[-1] != "0" else "1")

    with pytest.raises(AuthError):
        await handler.handle(db_session, body, altered, "10.0.0.1")

    assert await _event_count(db_session) == 0
    payment = await PaymentService().get_by_reference(db_session, "ref-hook-1")
    assert payment.status == PaymentStatus.PENDING
    assert (await db_session.execute(select(func.count(WalletTransaction.id)))).scalar_one() == 0


async def test_malformed_body_is_validation_error(db_session, handler, webhook_signature):
    body = b"not-json"

    with pytest.raises(ValidationError):
        await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")


async def test_charge_success_tops_up_wallet_once(db_session, handler, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    body = webhook_body("charge.success", "ref-hook-1", amount=500_000, event_id="evt-100")

    ack = await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")

    assert ack.status == "success"
    assert ack.message == "Charge processed successfully"
    assert ack.event_key == "charge.success:ref-hook-1:evt-100"
    wallet = await WalletService().get_wallet(db_session, USER)
    assert wallet.balance == 500_000

    event = await WebhookEventService().get_by_event_key(db_session, ack.event_key)
    assert event.processed_at is not None
    assert event.processing_status == "processed"
    assert event.client_ip == "10.0.0.1"
    assert event.payload["data"]["reference"] == "ref-hook-1"


async def test_replayed_event_is_duplicate(db_session, handler, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    body = webhook_body("charge.success", "ref-hook-1", amount=500_000)
    signature = webhook_signature(body)

    first = await handler.handle(db_session, body, signature, "10.0.0.1")
    replays = [await handler.handle(db_session, body, signature, "10.0.0.1") for _ in range(4)]

    assert first.status == "success"
    assert {ack.status for ack in replays} == {"duplicate_event"}
    assert (await WalletService().get_wallet(db_session, USER)).balance == 500_000
    assert await _event_count(db_session) == 1


async def test_replay_after_cache_loss_uses_event_table(db_session, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    body = webhook_body("charge.success", "ref-hook-1", amount=500_000)
    signature = webhook_signature(body)

    await GatewayWebhookHandler(cache=ProcessedEventCache()).handle(db_session, body, signature, "10.0.0.1")
    # Proceso reiniciado: caché vacía
    ack = await GatewayWebhookHandler(cache=ProcessedEventCache()).handle(db_session, body, signature, "10.0.0.1")

    assert ack.status == "duplicate_event"
    assert (await WalletService().get_wallet(db_session, USER)).balance == 500_000


async def test_concurrent_deliveries_credit_once(db_session, session_factory, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    body = webhook_body("charge.success", "ref-hook-1", amount=500_000, event_id="evt-race")
    signature = webhook_signature(body)

    async def _deliver():
        # Cada entrega con su propia sesión y su propia caché, como réplicas distintas
        async with session_factory() as session:
            handler = GatewayWebhookHandler(cache=ProcessedEventCache())
            return await handler.handle(session, body, signature, "10.0.0.1")

    acks = await asyncio.gather(*(_deliver() for _ in range(5)))

    assert {ack.status for ack in acks} <= {"success", "duplicate_event"}
    assert [ack.message for ack in acks].count("Charge processed successfully") == 1
    assert (await WalletService().get_wallet(db_session, USER)).balance == 500_000
    credits = await db_session.execute(
        select(func.count(WalletTransaction.id)).where(WalletTransaction.tx_type == WalletTxType.CREDIT)
    )
    assert credits.scalar_one() == 1
    assert await _event_count(db_session) == 1


async def test_distinct_event_for_completed_payment_is_ignored(db_session, handler, webhook_body, webhook_signature):
    await _pending_payment(db_session)
    first = webhook_body("charge.success", "ref-hook-1", amount=500_000, event_id="evt-1")
    second = webhook_body("charge.success", "ref-hook-1", amount=500_000, event_id="evt-2")

    await handler.handle(db_session, first, webhook_signature(first), "10.0.0.1")
    ack = await handler.handle(db_session, second, webhook_signature(second), "10.0.0.1")

    assert ack.status == "success"
    assert ack.message == "Payment already finalized"
    assert (await WalletService().get_wallet(db_session, USER)).balance == 500_000


async def test_amount_mismatch_credits_confirmed_amount(db_session, handler, webhook_body, webhook_signature):
    await _pending_payment(db_session, amount=500_000)
    body = webhook_body("charge.success", "ref-hook-1", amount=450_000)

    await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")

    assert (await WalletService().get_wallet(db_session, USER)).balance == 450_000


async def test_charge_success_grants_rental(db_session, handler, webhook_body, webhook_signature):
    payment = await _pending_payment(
        db_session,
        purpose=PaymentPurpose.RENTAL,
        amount=3000,
        metadata={"content_id": "movie-5", "content_type": "movie"},
        reference="ref-rental-1",
    )
    body = webhook_body("charge.success", "ref-rental-1", amount=3000)

    await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")

    refreshed = await PaymentService().get_payment(db_session, payment.id)
    assert refreshed.status == PaymentStatus.COMPLETED


async def test_charge_failed_marks_payment_failed(db_session, handler, webhook_body, webhook_signature):
    payment = await _pending_payment(db_session)
    body = webhook_body("charge.failed", "ref-hook-1", gateway_response="Declined by issuer")

    ack = await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")

    assert ack.message == "Failed charge processed"
    refreshed = await PaymentService().get_payment(db_session, payment.id)
    assert refreshed.status == PaymentStatus.FAILED
    assert refreshed.error_message == "Declined by issuer"


async def test_charge_failed_after_completion_is_ignored(db_session, handler, webhook_body, webhook_signature):
    payment = await _pending_payment(db_session)
    success = webhook_body("charge.success", "ref-hook-1", amount=500_000, event_id="evt-ok")
    failed = webhook_body("charge.failed", "ref-hook-1", event_id="evt-ko")

    await handler.handle(db_session, success, webhook_signature(success), "10.0.0.1")
    ack = await handler.handle(db_session, failed, webhook_signature(failed), "10.0.0.1")

    assert ack.message == "Payment already finalized"
    refreshed = await PaymentService().get_payment(db_session, payment.id)
    assert refreshed.status == PaymentStatus.COMPLETED


async def test_unknown_reference_is_acknowledged(db_session, handler, webhook_body, webhook_signature):
    body = webhook_body("charge.success", "ref-nobody", amount=1000)

    ack = await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")

    assert ack.status == "success"
    assert ack.message == "Payment not found for reference"
    event = await WebhookEventService().get_by_event_key(db_session, ack.event_key)
    assert event.processing_status == "payment_not_found"


@pytest.mark.parametrize(
    "event_type, message",
    [
        ("transfer.success", "Transfer processed successfully"),
        ("transfer.failed", "Failed transfer processed"),
        ("subscription.create", "Event acknowledged but not processed"),
    ],
)
async def test_non_charge_events_are_acknowledged(db_session, handler, webhook_body, webhook_signature, event_type, message):
    body = webhook_body(event_type, "trf-1")

    ack = await handler.handle(db_session, body, webhook_signature(body), "10.0.0.1")

    assert ack.status == "success"
    assert ack.message == message


# Fin del archivo tests/modules/payments/facades/webhooks/test_gateway_webhook_handler.py
