# -*- coding: utf-8 -*-
"""
app/modules/entitlements/repositories/purchase_repository.py

Repositorio para la tabla purchases.

Autor: ReelPass
Fecha: 08/09/2026
"""

from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.entitlements.enums import ContentType
from app.modules.entitlements.models.purchase_models import Purchase


class PurchaseRepository(BaseRepository[Purchase]):
    def __init__(self) -> None:
        super().__init__(Purchase)

    async def get_for_content(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        content_id: str,
        content_type: ContentType,
    ) -> Optional[Purchase]:
        stmt = select(Purchase).where(
            Purchase.user_id == user_id,
            Purchase.content_id == content_id,
            Purchase.content_type == content_type,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_for_user(self, session: AsyncSession, user_id: str) -> Sequence[Purchase]:
        stmt = (
            select(Purchase)
            .where(Purchase.user_id == user_id)
            .order_by(Purchase.created_at.desc(), Purchase.id.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_payment(self, session: AsyncSession, payment_id: int) -> Optional[Purchase]:
        result = await session.execute(select(Purchase).where(Purchase.payment_id == payment_id))
        return result.scalars().first()

    async def delete_for_payment(self, session: AsyncSession, payment_id: int) -> int:
        """Elimina la compra otorgada por un pago reembolsado."""
        stmt = (
            delete(Purchase)
            .where(Purchase.payment_id == payment_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.rowcount or 0


__all__ = ["PurchaseRepository"]

# Fin del archivo app/modules/entitlements/repositories/purchase_repository.py
