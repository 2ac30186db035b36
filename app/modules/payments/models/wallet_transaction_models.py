# -*- coding: utf-8 -*-
"""
app/modules/payments/models/wallet_transaction_models.py

Ledger inmutable de movimientos de wallet.

Cada fila:
- amount         → monto positivo
- tx_type        → credit/refund suman, debit resta
- balance_after  → saldo de la wallet después del movimiento

Append-only: ninguna ruta de código actualiza ni borra filas.

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, JSONDocument, UTCDateTime
from app.modules.payments.enums import WalletTxType
from app.modules.payments.utils.datetime_helpers import utcnow


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    wallet_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("wallets.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    payment_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    tx_type: Mapped[WalletTxType] = mapped_column(WalletTxType.as_db_enum(), nullable=False)

    amount: Mapped[int] = mapped_column(Integer, nullable=False)

    balance_after: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Saldo de la wallet después de aplicar esta transacción.",
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    metadata_json: Mapped[Dict[str, Any]] = mapped_column(
        "metadata",
        JSONDocument,
        nullable=False,
        default=dict,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        index=True,
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint("balance_after >= 0", name="balance_after_non_negative"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<WalletTransaction id={self.id} wallet_id={self.wallet_id} "
            f"type={self.tx_type} amount={self.amount} balance_after={self.balance_after}>"
        )


__all__ = ["WalletTransaction"]

# Fin del archivo app/modules/payments/models/wallet_transaction_models.py
