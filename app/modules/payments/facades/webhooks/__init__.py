# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/__init__.py

Exporta las funciones clave de facades/webhooks.

Autor: ReelPass
Fecha: 18/09/2026
"""

from .handler import DUPLICATE_EVENT, GatewayWebhookHandler, handle_gateway_webhook
from .normalize import (
    GatewayWebhook,
    WebhookPayloadError,
    build_event_key,
    parse_gateway_payload,
)

__all__ = [
    "DUPLICATE_EVENT",
    "GatewayWebhookHandler",
    "handle_gateway_webhook",
    "GatewayWebhook",
    "WebhookPayloadError",
    "build_event_key",
    "parse_gateway_payload",
]

# Fin del archivo app/modules/payments/facades/webhooks/__init__.py
