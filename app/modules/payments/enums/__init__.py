# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.

Autor: ReelPass
Fecha: 05/09/2026
"""

from .payment_method_enum import PaymentMethod
from .payment_provider_enum import PaymentProvider
from .payment_purpose_enum import PaymentPurpose
from .payment_status_enum import (
    PaymentStatus,
    TERMINAL_PAYMENT_STATUSES,
    CLAIMABLE_PAYMENT_STATUSES,
)
from .wallet_tx_type_enum import WalletTxType
from .webhook_event_type_enum import WebhookEventType

__all__ = [
    "PaymentMethod",
    "PaymentProvider",
    "PaymentPurpose",
    "PaymentStatus",
    "TERMINAL_PAYMENT_STATUSES",
    "CLAIMABLE_PAYMENT_STATUSES",
    "WalletTxType",
    "WebhookEventType",
]

# Fin del archivo app/modules/payments/enums/__init__.py
