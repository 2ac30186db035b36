# -*- coding: utf-8 -*-
"""
app/modules/payments/models/__init__.py

Modelos ORM del módulo Payments:
- Payment
- Wallet
- WalletTransaction
- WebhookEvent

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from .payment_models import Payment
from .wallet_models import Wallet
from .wallet_transaction_models import WalletTransaction
from .webhook_event_models import WebhookEvent

__all__ = [
    "Payment",
    "Wallet",
    "WalletTransaction",
    "WebhookEvent",
]

# Fin del archivo app/modules/payments/models/__init__.py
