# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/wallet_repository.py

Repositorio para la tabla wallets.

apply_delta es el único punto que escribe wallets.balance: un UPDATE
condicional que falla (0 filas) si el saldo quedaría negativo.

Autor: ReelPass
Fecha: 07/09/2026
"""

from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.models.wallet_models import Wallet
from app.modules.payments.utils.datetime_helpers import utcnow


class WalletRepository(BaseRepository[Wallet]):
    def __init__(self):
        super().__init__(Wallet)

    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[Wallet]:
        return await session.get(Wallet, obj_id, populate_existing=True)

    # -----------------------------------------------------------
    # Obtener wallet por user_id (única en el sistema)
    # -----------------------------------------------------------
    async def get_by_user_id(
        self, session: AsyncSession, user_id: str
    ) -> Optional[Wallet]:
        stmt = (
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    # -----------------------------------------------------------
    # Mutación atómica del saldo
    # -----------------------------------------------------------
    async def apply_delta(
        self,
        session: AsyncSession,
        wallet_id: int,
        delta: int,
    ) -> Optional[int]:
        """
        balance = balance + delta, solo si el resultado es >= 0.

        Returns:
            El saldo resultante, o None si la wallet no existe o el
            saldo no alcanza.
        """
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .where(Wallet.balance + delta >= 0)
            .values(balance=Wallet.balance + delta, updated_at=utcnow())
            .returning(Wallet.balance)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_balance(self, session: AsyncSession, wallet_id: int) -> Optional[int]:
        result = await session.execute(select(Wallet.balance).where(Wallet.id == wallet_id))
        return result.scalar_one_or_none()


__all__ = ["WalletRepository"]

# Fin del archivo app/modules/payments/repositories/wallet_repository.py
