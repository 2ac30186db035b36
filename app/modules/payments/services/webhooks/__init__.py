# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/__init__.py

Servicios relacionados con webhooks de pagos.

Autor: ReelPass
Fecha: 15/09/2026
"""

from .event_dedup import (
    ProcessedEventCache,
    get_processed_event_cache,
    reset_processed_event_cache,
)
from .signature_verification import compute_signature, verify_gateway_signature

__all__ = [
    "ProcessedEventCache",
    "get_processed_event_cache",
    "reset_processed_event_cache",
    "compute_signature",
    "verify_gateway_signature",
]

# Fin del archivo app/modules/payments/services/webhooks/__init__.py
