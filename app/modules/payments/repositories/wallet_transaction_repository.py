# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/wallet_transaction_repository.py

Repositorio del ledger de wallet (solo inserción y lectura).

Autor: ReelPass
Fecha: 07/09/2026
"""

from typing import Sequence

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import WalletTxType
from app.modules.payments.models.wallet_transaction_models import WalletTransaction


class WalletTransactionRepository(BaseRepository[WalletTransaction]):
    def __init__(self) -> None:
        super().__init__(WalletTransaction)

    async def list_by_wallet(
        self,
        session: AsyncSession,
        wallet_id: int,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[WalletTransaction]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.wallet_id == wallet_id)
            .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_by_payment(
        self,
        session: AsyncSession,
        payment_id: int,
    ) -> Sequence[WalletTransaction]:
        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.payment_id == payment_id)
            .order_by(WalletTransaction.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_wallet(self, session: AsyncSession, wallet_id: int) -> int:
        stmt = select(func.count(WalletTransaction.id)).where(WalletTransaction.wallet_id == wallet_id)
        return int((await session.execute(stmt)).scalar_one())

    # -----------------------------------------------------------
    # Reconciliación
    # -----------------------------------------------------------
    async def compute_signed_sum(self, session: AsyncSession, wallet_id: int) -> int:
        """Suma de abonos (credit, refund) menos cargos (debit)."""
        signed = case(
            (WalletTransaction.tx_type == WalletTxType.DEBIT, -WalletTransaction.amount),
            else_=WalletTransaction.amount,
        )
        stmt = select(func.coalesce(func.sum(signed), 0)).where(
            WalletTransaction.wallet_id == wallet_id
        )
        return int((await session.execute(stmt)).scalar_one())


__all__ = ["WalletTransactionRepository"]

# Fin del archivo app/modules/payments/repositories/wallet_transaction_repository.py
