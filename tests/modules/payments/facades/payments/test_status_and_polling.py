# tests/modules/payments/facades/payments/test_status_and_polling.py
# -*- coding: utf-8 -*-
"""
Suite: consulta de estado y polling acotado
Objetivo:
  - El estado solo es visible para el dueño del pago
  - verify=true consulta la pasarela; si falla se reporta "unavailable"
  - El polling termina al ver un estado terminal, al agotar intentos
    o al alcanzar el techo de tiempo
"""

import asyncio

import pytest

from app.modules.payments.adapters.gateway_client import GatewayVerifyResult
from app.modules.payments.enums import PaymentProvider, PaymentPurpose, PaymentStatus
from app.modules.payments.errors import NotFoundError, UpstreamError
from app.modules.payments.facades.payments import (
    complete_payment,
    get_payment_status,
    wait_for_terminal_status,
)
from app.modules.payments.services import PaymentService

USER = "user-status"


async def _pending(session, reference="ref-status-1"):
    service = PaymentService()
    payment = await service.create_payment(
        session,
        user_id=USER,
        amount=3000,
        currency="NGN",
        purpose=PaymentPurpose.RENTAL,
        provider=PaymentProvider.GATEWAY,
        status=PaymentStatus.INITIATED,
        metadata={"content_id": "movie-1", "content_type": "movie"},
        idempotency_key=reference,
        provider_reference=reference,
    )
    await service.mark_pending(session, payment, provider_reference=reference, checkout_url="https://c/1")
    await session.commit()
    return payment


async def test_status_of_own_payment(db_session):
    payment = await _pending(db_session)

    status = await get_payment_status(db_session, payment_id=payment.id, user_id=USER)

    assert status.status == PaymentStatus.PENDING
    assert status.is_terminal is False
    assert status.checkout_url == "https://c/1"
    assert status.rental_id is None
    assert status.gateway_status is None


async def test_status_of_someone_elses_payment_is_not_found(db_session):
    payment = await _pending(db_session)

    with pytest.raises(NotFoundError):
        await get_payment_status(db_session, payment_id=payment.id, user_id="intruder")


async def test_status_after_completion_links_rental(db_session):
    payment = await _pending(db_session)
    await complete_payment(db_session, payment)
    await db_session.commit()

    status = await get_payment_status(db_session, payment_id=payment.id, user_id=USER)

    assert status.status == PaymentStatus.COMPLETED
    assert status.is_terminal is True
    assert status.rental_id is not None


async def test_verify_reports_gateway_status(db_session, fake_gateway):
    payment = await _pending(db_session)
    fake_gateway.verify_transaction.return_value = GatewayVerifyResult(reference="ref-status-1", status="abandoned")

    status = await get_payment_status(
        db_session, payment_id=payment.id, user_id=USER, verify=True, gateway=fake_gateway
    )

    fake_gateway.verify_transaction.assert_awaited_once_with("ref-status-1")
    assert status.gateway_status == "abandoned"
    assert status.status == PaymentStatus.PENDING


async def test_verify_degrades_when_gateway_fails(db_session, fake_gateway):
    payment = await _pending(db_session)
    fake_gateway.verify_transaction.side_effect = UpstreamError("Gateway request timed out", timed_out=True)

    status = await get_payment_status(
        db_session, payment_id=payment.id, user_id=USER, verify=True, gateway=fake_gateway
    )

    assert status.gateway_status == "unavailable"


async def test_poll_returns_immediately_for_terminal_payment(db_session):
    payment = await _pending(db_session)
    await PaymentService().mark_failed(db_session, payment, "Declined")
    await db_session.commit()

    result = await wait_for_terminal_status(db_session, payment.id, USER, interval_s=0.01)

    assert result.is_terminal
    assert result.attempts == 1
    assert result.timed_out is False


async def test_poll_stops_after_max_attempts(db_session):
    payment = await _pending(db_session)

    result = await wait_for_terminal_status(db_session, payment.id, USER, max_attempts=3, interval_s=0.01)

    assert result.attempts == 3
    assert result.is_terminal is False
    assert result.timed_out is False


async def test_poll_hits_time_ceiling(db_session):
    payment = await _pending(db_session)

    result = await wait_for_terminal_status(
        db_session, payment.id, USER, max_attempts=1000, interval_s=0.05, timeout_s=0.2
    )

    assert result.timed_out is True
    assert result.payment.status == PaymentStatus.PENDING


async def test_poll_sees_completion_from_another_session(db_session, session_factory):
    payment = await _pending(db_session)

    async def _complete_later():
        await asyncio.sleep(0.05)
        async with session_factory() as other:
            fresh = await PaymentService().get_payment(other, payment.id)
            await complete_payment(other, fresh)
            await other.commit()

    result, _ = await asyncio.gather(
        wait_for_terminal_status(db_session, payment.id, USER, max_attempts=50, interval_s=0.02, timeout_s=5),
        _complete_later(),
    )

    assert result.is_terminal
    assert result.payment.status == PaymentStatus.COMPLETED


# Fin del archivo tests/modules/payments/facades/payments/test_status_and_polling.py
