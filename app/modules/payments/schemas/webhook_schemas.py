# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/webhook_schemas.py

Respuesta del endpoint de webhooks.

Autor: ReelPass
Fecha: 09/09/2026
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class WebhookAck(BaseModel):
    """
    Acuse para la pasarela.

    status: success | duplicate_event
    """

    status: str
    message: Optional[str] = None
    event_key: Optional[str] = None


__all__ = ["WebhookAck"]

# Fin del archivo app/modules/payments/schemas/webhook_schemas.py
