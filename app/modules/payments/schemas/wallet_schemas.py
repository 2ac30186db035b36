# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/wallet_schemas.py

Esquemas para exponer la wallet del usuario y su ledger.

Autor: ReelPass
Fecha: 09/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.payments.enums import WalletTxType
from app.modules.payments.schemas.common_schemas import PageMeta


class WalletOut(BaseModel):
    """Representación de la wallet de un usuario."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="ID interno de la wallet.")
    user_id: str = Field(description="ID del usuario dueño de la wallet.")
    balance: int = Field(ge=0, description="Saldo en kobo.")
    currency: str = Field(description="Moneda de la wallet.")


class WalletTransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    wallet_id: int
    payment_id: Optional[int] = None
    tx_type: WalletTxType
    amount: int
    balance_after: int
    description: Optional[str] = None
    created_at: datetime


class WalletTransactionsPage(BaseModel):
    items: List[WalletTransactionOut]
    meta: PageMeta


class WalletAdjustmentIn(BaseModel):
    """Ajuste manual de saldo (solo administradores)."""

    user_id: str = Field(min_length=1, max_length=128)
    amount: int = Field(gt=0, description="Monto en kobo.")
    tx_type: WalletTxType = Field(description="credit | debit | refund")
    reason: str = Field(min_length=1, max_length=500)


class WalletAdjustmentOut(BaseModel):
    wallet: WalletOut
    transaction: WalletTransactionOut


class WalletReconciliationOut(BaseModel):
    wallet_id: int
    balance: int
    ledger_sum: int
    is_consistent: bool


__all__ = [
    "WalletOut",
    "WalletTransactionOut",
    "WalletTransactionsPage",
    "WalletAdjustmentIn",
    "WalletAdjustmentOut",
    "WalletReconciliationOut",
]

# Fin del archivo app/modules/payments/schemas/wallet_schemas.py
