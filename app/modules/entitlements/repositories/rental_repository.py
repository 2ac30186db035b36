# -*- coding: utf-8 -*-
"""
app/modules/entitlements/repositories/rental_repository.py

Repositorio para la tabla rentals.

La vigencia de una renta se decide siempre contra `now`
(status=active AND expiration_date >= now); el job de expiración solo
limpia el status para reportes.

Autor: ReelPass
Fecha: 08/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.entitlements.enums import ContentType, RentalStatus
from app.modules.entitlements.models.rental_models import Rental


class RentalRepository(BaseRepository[Rental]):
    def __init__(self) -> None:
        super().__init__(Rental)

    async def get_active(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        content_id: str,
        content_type: ContentType,
        now: datetime,
    ) -> Optional[Rental]:
        """Renta vigente con la expiración más lejana, si existe."""
        stmt = (
            select(Rental)
            .where(
                Rental.user_id == user_id,
                Rental.content_id == content_id,
                Rental.content_type == content_type,
                Rental.status == RentalStatus.ACTIVE,
                Rental.expiration_date >= now,
            )
            .order_by(Rental.expiration_date.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_active_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        now: datetime,
    ) -> Sequence[Rental]:
        stmt = (
            select(Rental)
            .where(
                Rental.user_id == user_id,
                Rental.status == RentalStatus.ACTIVE,
                Rental.expiration_date >= now,
            )
            .order_by(Rental.expiration_date.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_payment(self, session: AsyncSession, payment_id: int) -> Optional[Rental]:
        stmt = (
            select(Rental)
            .where(Rental.payment_id == payment_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def expire_overdue(self, session: AsyncSession, *, now: datetime) -> int:
        """Marca como expired las rentas activas vencidas. Devuelve cuántas."""
        stmt = (
            update(Rental)
            .where(Rental.status == RentalStatus.ACTIVE, Rental.expiration_date < now)
            .values(status=RentalStatus.EXPIRED)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def revoke_for_payment(self, session: AsyncSession, payment_id: int) -> int:
        """Revoca las rentas activas otorgadas por un pago reembolsado."""
        stmt = (
            update(Rental)
            .where(Rental.payment_id == payment_id, Rental.status == RentalStatus.ACTIVE)
            .values(status=RentalStatus.REVOKED)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0


__all__ = ["RentalRepository"]

# Fin del archivo app/modules/entitlements/repositories/rental_repository.py
