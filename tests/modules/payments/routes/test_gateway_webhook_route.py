# tests/modules/payments/routes/test_gateway_webhook_route.py
# -*- coding: utf-8 -*-
"""
Suite: POST /payments/webhooks/gateway (extremo a extremo)
Objetivo:
  - Recarga por pasarela: pending → webhook firmado → saldo acreditado una vez
    aunque el webhook se entregue varias veces
  - Body alterado o firma alterada en un carácter: 401 sin escrituras
  - Renta por pasarela: el webhook otorga el acceso
  - Rate limit por IP
"""

from sqlalchemy import func, select

from app.modules.payments.middleware import reset_rate_limiters
from app.modules.payments.models import WebhookEvent
from app.shared.config import reset_settings

USER = "user-e2e"
SIGNATURE_HEADER = "x-provider-signature"


async def _start_topup(async_client, auth_headers, amount=500_000):
    resp = await async_client.post(
        "/payments",
        json={"amount": amount, "purpose": "wallet_topup", "email": "viewer@example.com"},
        headers=auth_headers(USER),
    )
    assert resp.status_code == 201
    return resp.json()


async def _reference(async_client, auth_headers, payment_id):
    resp = await async_client.get(f"/payments/{payment_id}", headers=auth_headers(USER))
    return resp.json()["provider_reference"]


async def _post_webhook(async_client, body, signature):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers[SIGNATURE_HEADER] = signature
    return await async_client.post("/payments/webhooks/gateway", content=body, headers=headers)


async def test_topup_webhook_credits_once_across_retries(
    async_client, auth_headers, use_fake_gateway, webhook_body, webhook_signature
):
    created = await _start_topup(async_client, auth_headers)
    assert created["status"] == "pending"
    reference = await _reference(async_client, auth_headers, created["payment_id"])

    body = webhook_body("charge.success", reference, amount=500_000, event_id="evt-e2e-1")
    signature = webhook_signature(body)
    acks = [await _post_webhook(async_client, body, signature) for _ in range(5)]

    assert [r.status_code for r in acks] == [200] * 5
    assert acks[0].json()["status"] == "success"
    assert {r.json()["status"] for r in acks[1:]} == {"duplicate_event"}

    wallet = await async_client.get("/wallet", headers=auth_headers(USER))
    assert wallet.json()["balance"] == 500_000

    history = await async_client.get("/wallet/transactions", headers=auth_headers(USER))
    assert history.json()["meta"]["total"] == 1
    assert history.json()["items"][0]["payment_id"] == created["payment_id"]

    status = await async_client.get(f"/payments/{created['payment_id']}", headers=auth_headers(USER))
    assert status.json()["status"] == "completed"


async def test_tampered_body_is_rejected_without_writes(
    async_client, auth_headers, use_fake_gateway, webhook_body, webhook_signature, db_session
):
    created = await _start_topup(async_client, auth_headers)
    reference = await _reference(async_client, auth_headers, created["payment_id"])

    body = webhook_body("charge.success", reference, amount=500_000)
    signature = webhook_signature(body)
    tampered = body.replace(b"500000", b"900000")

    resp = await _post_webhook(async_client, tampered, signature)
    missing = await _post_webhook(async_client, body, None)

    assert resp.status_code == 401
    assert resp.json()["detail"]["error"] == "unauthorized"
    assert missing.status_code == 401
    status = await async_client.get(f"/payments/{created['payment_id']}", headers=auth_headers(USER))
    assert status.json()["status"] == "pending"

    events = (await db_session.execute(select(func.count(WebhookEvent.id)))).scalar_one()
    assert events == 0


async def test_one_character_signature_change_is_rejected(
    async_client, auth_headers, use_fake_gateway, webhook_body, webhook_signature, db_session
):
    created = await _start_topup(async_client, auth_headers)
    reference = await _reference(async_client, auth_headers, created["payment_id"])

    body = webhook_body("charge.success", reference, amount=500_000)
    signature = webhook_signature(body)
    altered = ("f" if signature[0] != "f" else "e") + signature[1:]

    resp = await _post_webhook(async_client, body, altered)

    assert resp.status_code == 401
    assert resp.json()["detail"] == {"error": "unauthorized", "message": "Invalid signature"}
    wallet = await async_client.get("/wallet", headers=auth_headers(USER))
    assert wallet.json()["balance"] == 0

    events = (await db_session.execute(select(func.count(WebhookEvent.id)))).scalar_one()
    assert events == 0


async def test_rental_webhook_grants_access(
    async_client, auth_headers, use_fake_gateway, webhook_body, webhook_signature
):
    created = await async_client.post(
        "/payments",
        json={
            "amount": 3000,
            "purpose": "rental",
            "email": "viewer@example.com",
            "paymentMethod": "card",
            "metadata": {"content_id": "movie-77", "content_type": "movie"},
        },
        headers=auth_headers(USER),
    )
    payment_id = created.json()["payment_id"]
    reference = await _reference(async_client, auth_headers, payment_id)

    before = await async_client.post(
        "/entitlements/access",
        json={"content_id": "movie-77", "content_type": "movie"},
        headers=auth_headers(USER),
    )
    body = webhook_body("charge.success", reference, amount=3000)
    await _post_webhook(async_client, body, webhook_signature(body))
    after = await async_client.post(
        "/entitlements/access",
        json={"content_id": "movie-77", "content_type": "movie"},
        headers=auth_headers(USER),
    )

    assert before.json()["has_access"] is False
    assert after.json()["has_access"] is True
    assert after.json()["access_type"] == "rental"


async def test_malformed_json_is_bad_request(async_client, webhook_signature):
    body = b"{not json"

    resp = await _post_webhook(async_client, body, webhook_signature(body))

    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "validation_error"


async def test_webhook_rate_limit_per_ip(async_client, monkeypatch, webhook_body, webhook_signature):
    monkeypatch.setenv("PAYMENTS_WEBHOOK_RATE_LIMIT_REQUESTS", "2")
    reset_settings()
    reset_rate_limiters()
    body = webhook_body("transfer.success", "trf-1")
    signature = webhook_signature(body)

    codes = [(await _post_webhook(async_client, body, signature)).status_code for _ in range(3)]

    assert codes[:2] == [200, 200]
    assert codes[2] == 429


# Fin del archivo tests/modules/payments/routes/test_gateway_webhook_route.py
