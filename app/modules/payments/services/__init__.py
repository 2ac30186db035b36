# -*- coding: utf-8 -*-
"""
app/modules/payments/services/__init__.py

Servicios de bajo nivel del módulo Payments.

Autor: ReelPass
Fecha: 12/09/2026
"""

from .payment_service import PaymentService
from .wallet_ledger_service import WalletLedger, WalletReconciliation
from .wallet_service import WalletService
from .webhook_event_service import WebhookEventService

__all__ = [
    "PaymentService",
    "WalletLedger",
    "WalletReconciliation",
    "WalletService",
    "WebhookEventService",
]

# Fin del archivo app/modules/payments/services/__init__.py
