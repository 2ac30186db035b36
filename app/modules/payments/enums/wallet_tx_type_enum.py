# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/wallet_tx_type_enum.py

Tipo de movimiento en el ledger de la wallet.

credit y refund suman al saldo; debit resta.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum


class WalletTxType(StrEnum):
    """Tipo de movimiento en el ledger."""

    CREDIT = "credit"
    DEBIT = "debit"
    REFUND = "refund"

    __pg_enum_name__ = "wallet_tx_type_enum"

    @property
    def sign(self) -> int:
        """+1 para abonos, -1 para cargos."""
        match self:
            case WalletTxType.CREDIT | WalletTxType.REFUND:
                return 1
            case WalletTxType.DEBIT:
                return -1

    def signed(self, amount: int) -> int:
        return self.sign * amount

    @classmethod
    def as_db_enum(cls) -> SAEnum:
        return as_db_enum(cls)


__all__ = ["WalletTxType"]
