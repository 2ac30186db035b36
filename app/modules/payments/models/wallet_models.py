# -*- coding: utf-8 -*-
"""
app/modules/payments/models/wallet_models.py

Modelo ORM para la tabla wallets.

Reglas de negocio:
- Una wallet por usuario (UNIQUE user_id).
- balance >= 0 (CHECK en BD).
- El balance solo cambia vía WalletLedgerService.apply_transaction,
  que escribe también la fila del ledger.

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime
from app.modules.payments.utils.datetime_helpers import utcnow


class Wallet(Base):
    """Billetera de un usuario (saldo en unidades menores)."""

    __tablename__ = "wallets"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="ID del usuario dueño de la wallet.",
    )

    balance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        doc="Saldo denormalizado; reconcilia con la suma del ledger.",
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="NGN")

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_wallets_user_id"),
        CheckConstraint("balance >= 0", name="balance_non_negative"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<Wallet id={self.id} user_id={self.user_id} balance={self.balance}>"


__all__ = ["Wallet"]

# Fin del archivo app/modules/payments/models/wallet_models.py
