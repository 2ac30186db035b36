# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/__init__.py

Esquemas Pydantic del módulo Payments.

Autor: ReelPass
Fecha: 09/09/2026
"""

from .common_schemas import PageMeta
from .metadata_schemas import (
    PaymentMetadata,
    PurchaseMetadata,
    RentalMetadata,
    SubscriptionMetadata,
    WalletTopupMetadata,
    parse_metadata,
)
from .payment_schemas import (
    PaymentCreateIn,
    PaymentRefundIn,
    PaymentRefundOut,
    PaymentRequest,
    PaymentResult,
    PaymentStatusOut,
)
from .wallet_schemas import (
    WalletAdjustmentIn,
    WalletAdjustmentOut,
    WalletOut,
    WalletReconciliationOut,
    WalletTransactionOut,
    WalletTransactionsPage,
)
from .webhook_schemas import WebhookAck

__all__ = [
    "PageMeta",
    "PaymentMetadata",
    "PurchaseMetadata",
    "RentalMetadata",
    "SubscriptionMetadata",
    "WalletTopupMetadata",
    "parse_metadata",
    "PaymentCreateIn",
    "PaymentRefundIn",
    "PaymentRefundOut",
    "PaymentRequest",
    "PaymentResult",
    "PaymentStatusOut",
    "WalletAdjustmentIn",
    "WalletAdjustmentOut",
    "WalletOut",
    "WalletReconciliationOut",
    "WalletTransactionOut",
    "WalletTransactionsPage",
    "WebhookAck",
]
