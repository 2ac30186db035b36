# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/__init__.py

Superficie de exportación de las fachadas de pagos.

Incluye:
- PaymentProcessor: inicio de pagos (wallet y pasarela)
- PaymentRefunder: reembolso administrativo de pagos completados
- complete_payment / claim_and_fulfill: cierre y fulfillment
- get_payment_status / wait_for_terminal_status: consulta y polling
- validadores de entrada

Autor: ReelPass
Fecha: 17/09/2026
"""

from __future__ import annotations

from .completion import CompletionResult, claim_and_fulfill, complete_payment
from .polling import PollResult, wait_for_terminal_status
from .process_payment import PaymentProcessor, mint_idempotency_key
from .refunds import PaymentRefunder
from .status import build_payment_status, get_payment_status
from .validators import (
    ValidationResult,
    parse_payment_request,
    sanitize_input,
    validate_amount,
    validate_currency,
    validate_email,
    validate_idempotency_key,
    validate_payment_request,
    validate_purpose,
)

__all__ = [
    "CompletionResult",
    "claim_and_fulfill",
    "complete_payment",
    "PollResult",
    "wait_for_terminal_status",
    "PaymentProcessor",
    "mint_idempotency_key",
    "PaymentRefunder",
    "build_payment_status",
    "get_payment_status",
    "ValidationResult",
    "parse_payment_request",
    "sanitize_input",
    "validate_amount",
    "validate_currency",
    "validate_email",
    "validate_idempotency_key",
    "validate_payment_request",
    "validate_purpose",
]

# Fin del archivo app/modules/payments/facades/payments/__init__.py
