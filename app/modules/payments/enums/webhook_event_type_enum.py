# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/webhook_event_type_enum.py

Eventos de la pasarela que el handler reconoce.

Los tipos desconocidos se registran y se acusan sin despachar.

Autor: ReelPass
Fecha: 05/09/2026
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional


class WebhookEventType(StrEnum):
    CHARGE_SUCCESS = "charge.success"
    CHARGE_FAILED = "charge.failed"
    TRANSFER_SUCCESS = "transfer.success"
    TRANSFER_FAILED = "transfer.failed"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["WebhookEventType"]:
        """Devuelve el miembro correspondiente o None si el tipo no se reconoce."""
        try:
            return cls(raw) if raw else None
        except ValueError:
            return None


__all__ = ["WebhookEventType"]
