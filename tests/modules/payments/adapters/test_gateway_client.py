# tests/modules/payments/adapters/test_gateway_client.py
# -*- coding: utf-8 -*-
"""
Suite: GatewayClient
Objetivo:
  - initialize_transaction envía Bearer + payload y devuelve la URL de checkout
  - verify_transaction normaliza estado y monto
  - refund_transaction envía la referencia, el monto y la nota del admin
  - Timeout/transporte → UpstreamError(timed_out=True)
  - HTTP 4xx o status=false → UpstreamError(timed_out=False) con el body crudo
Transporte simulado con httpx.MockTransport (sin red).
"""

import json

import httpx
import pytest
from pydantic import SecretStr

from app.modules.payments.adapters.gateway_client import GatewayClient
from app.modules.payments.errors import UpstreamError
from app.shared.config.settings_payments import get_payments_settings


def _client(handler):
    return GatewayClient(transport=httpx.MockTransport(handler))


async def test_initialize_transaction_posts_payload_with_bearer():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["json"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": True,
                "message": "Authorization URL created",
                "data": {
                    "authorization_url": "https://checkout.paystack.com/abc",
                    "access_code": "abc",
                    "reference": "ref-123",
                },
            },
        )

    client = _client(handler)
    result = await client.initialize_transaction(
        email="viewer@example.com",
        amount=500_000,
        currency="NGN",
        reference="ref-123",
        metadata={"payment_id": 7},
    )
    await client.aclose()

    assert seen["path"] == "/transaction/initialize"
    assert seen["auth"] == "Bearer sk_test_reelpass_webhooks"
    assert seen["json"]["amount"] == 500_000
    assert seen["json"]["metadata"] == {"payment_id": 7}
    assert result.checkout_url == "https://checkout.paystack.com/abc"
    assert result.reference == "ref-123"
    assert result.access_code == "abc"


async def test_verify_transaction_normalises_response():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/transaction/verify/ref-9"
        return httpx.Response(
            200,
            json={
                "status": True,
                "data": {"reference": "ref-9", "status": "success", "amount": 3000, "gateway_response": "Approved"},
            },
        )

    result = await _client(handler).verify_transaction("ref-9")

    assert result.is_success
    assert result.amount == 3000
    assert result.gateway_response == "Approved"


async def test_refund_transaction_posts_reference_and_amount():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["json"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": True,
                "message": "Refund has been queued for processing",
                "data": {"id": 3018284, "status": "pending", "amount": 3000},
            },
        )

    result = await _client(handler).refund_transaction(
        reference="ref-9", amount=3000, currency="NGN", note="Refund by admin a1: stream failed"
    )

    assert seen["path"] == "/refund"
    assert seen["json"] == {
        "transaction": "ref-9",
        "amount": 3000,
        "currency": "NGN",
        "merchant_note": "Refund by admin a1: stream failed",
    }
    assert result.refund_id == "3018284"
    assert result.status == "pending"
    assert result.amount == 3000


async def test_refund_rejection_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"status": False, "message": "Transaction has been fully reversed"})

    with pytest.raises(UpstreamError) as exc:
        await _client(handler).refund_transaction(reference="ref-9", amount=3000, currency="NGN")

    assert exc.value.message == "Transaction has been fully reversed"


async def test_rejection_is_upstream_error_with_raw_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"status": False, "message": "Invalid amount"})

    with pytest.raises(UpstreamError) as exc:
        await _client(handler).initialize_transaction(
            email="viewer@example.com", amount=100, currency="NGN", reference="ref-bad"
        )

    assert exc.value.timed_out is False
    assert exc.value.message == "Invalid amount"
    assert exc.value.raw_response == {"status": False, "message": "Invalid amount"}
    assert exc.value.public_message == "Payment processing failed"


async def test_status_false_with_http_200_is_a_rejection():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": False, "message": "Duplicate reference"})

    with pytest.raises(UpstreamError) as exc:
        await _client(handler).verify_transaction("ref-dup")

    assert exc.value.timed_out is False


async def test_missing_authorization_url_is_a_rejection():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "data": {}})

    with pytest.raises(UpstreamError):
        await _client(handler).initialize_transaction(
            email="viewer@example.com", amount=100, currency="NGN", reference="ref-x"
        )


@pytest.mark.parametrize(
    "error",
    [httpx.ReadTimeout("read timed out"), httpx.ConnectError("connection refused")],
)
async def test_timeouts_and_transport_errors_are_flagged(error):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    with pytest.raises(UpstreamError) as exc:
        await _client(handler).verify_transaction("ref-slow")

    assert exc.value.timed_out is True


async def test_missing_secret_key_fails_before_any_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"status": True, "data": {}})

    settings = get_payments_settings().model_copy(update={"gateway_secret_key": SecretStr("")})
    client = GatewayClient(settings, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError):
        await client.verify_transaction("ref-1")
    assert calls == []


# Fin del archivo tests/modules/payments/adapters/test_gateway_client.py
