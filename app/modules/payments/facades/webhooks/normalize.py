# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/normalize.py

Normalización de payloads de webhooks de la pasarela.

Formato recibido:
    {"event": "charge.success", "data": {"id": ..., "reference": ...,
     "amount": 500000, "currency": "NGN", "gateway_response": ...}}

La identidad del evento es `event_type:reference:event_id`. Si la
pasarela omite `id` o `reference`, la parte faltante se sustituye por el
SHA-256 del body crudo para que un replay exacto siga deduplicándose.

Autor: ReelPass
Fecha: 18/09/2026
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.payments.enums import WebhookEventType

logger = logging.getLogger(__name__)


class WebhookPayloadError(ValueError):
    """El body del webhook no es un evento válido."""


class GatewayWebhook(BaseModel):
    """DTO normalizado de un evento de la pasarela."""

    model_config = ConfigDict(frozen=True)

    event_type: str = Field(description="Tipo de evento tal como lo envía la pasarela")
    event: Optional[WebhookEventType] = Field(default=None, description="Tipo reconocido o None")
    event_id: Optional[str] = None
    reference: Optional[str] = None
    amount: Optional[int] = Field(default=None, description="Monto confirmado en kobo")
    currency: Optional[str] = None
    gateway_response: Optional[str] = None
    event_key: str
    payload: Dict[str, Any] = Field(default_factory=dict)


def body_digest(raw_body: bytes) -> str:
    return hashlib.sha256(raw_body).hexdigest()


def build_event_key(
    event_type: str,
    reference: Optional[str],
    event_id: Optional[str],
    raw_body: bytes,
) -> str:
    digest = None
    if not reference or not event_id:
        digest = body_digest(raw_body)
    return f"{event_type}:{reference or digest}:{event_id or digest}"


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _as_amount(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_gateway_payload(raw_body: bytes) -> GatewayWebhook:
    """
    Parsea el body crudo.

    Raises:
        WebhookPayloadError: JSON inválido o sin `event`.
    """
    try:
        payload = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError) as e:
        raise WebhookPayloadError(f"Malformed JSON body: {e}") from e

    if not isinstance(payload, dict):
        raise WebhookPayloadError("Webhook body must be a JSON object")

    event_type = payload.get("event")
    if not isinstance(event_type, str) or not event_type.strip():
        raise WebhookPayloadError("Webhook body is missing 'event'")
    event_type = event_type.strip()

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise WebhookPayloadError("Webhook 'data' must be an object")

    event_id = _as_optional_str(data.get("id"))
    reference = _as_optional_str(data.get("reference"))
    currency = _as_optional_str(data.get("currency"))

    return GatewayWebhook(
        event_type=event_type,
        event=WebhookEventType.parse(event_type),
        event_id=event_id,
        reference=reference,
        amount=_as_amount(data.get("amount")),
        currency=currency.upper() if currency else None,
        gateway_response=_as_optional_str(data.get("gateway_response")),
        event_key=build_event_key(event_type, reference, event_id, raw_body),
        payload=payload,
    )


__all__ = [
    "GatewayWebhook",
    "WebhookPayloadError",
    "body_digest",
    "build_event_key",
    "parse_gateway_payload",
]

# Fin del archivo app/modules/payments/facades/webhooks/normalize.py
