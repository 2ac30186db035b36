# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/__init__.py

Repositorios del módulo Payments.

Autor: ReelPass
Fecha: 07/09/2026
"""

from .payment_repository import PaymentRepository
from .wallet_repository import WalletRepository
from .wallet_transaction_repository import WalletTransactionRepository
from .webhook_event_repository import WebhookEventRepository

__all__ = [
    "PaymentRepository",
    "WalletRepository",
    "WalletTransactionRepository",
    "WebhookEventRepository",
]
