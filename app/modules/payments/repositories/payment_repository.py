# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/payment_repository.py

Repositorio para la tabla payments.

Responsabilidades:
- Búsqueda por idempotency_key y provider_reference
- Transiciones de estado condicionadas al estado actual (UPDATE ... WHERE status IN ...)

Las transiciones no tocan el objeto ORM en memoria: quien necesite el
estado nuevo vuelve a leer (las lecturas usan populate_existing).

Autor: ReelPass
Fecha: 07/09/2026
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.utils.datetime_helpers import utcnow


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self) -> None:
        super().__init__(Payment)

    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[Payment]:
        return await session.get(Payment, obj_id, populate_existing=True)

    async def get_by_idempotency_key(
        self,
        session: AsyncSession,
        idempotency_key: str,
    ) -> Optional[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.idempotency_key == idempotency_key)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_by_provider_reference(
        self,
        session: AsyncSession,
        provider_reference: str,
    ) -> Optional[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.provider_reference == provider_reference)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_by_user(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    # -----------------------------------------------------------
    # Transiciones de estado
    # -----------------------------------------------------------
    async def transition(
        self,
        session: AsyncSession,
        payment_id: int,
        *,
        from_statuses: Iterable[PaymentStatus],
        to_status: PaymentStatus,
        **values: Any,
    ) -> bool:
        """
        Mueve el pago a `to_status` solo si su estado actual está en
        `from_statuses`. Devuelve True si esta llamada hizo la transición.

        Dos llamadas concurrentes sobre el mismo pago: la segunda espera el
        lock de fila y, al reevaluar el WHERE, no encuentra nada.
        """
        stmt = (
            update(Payment)
            .where(Payment.id == payment_id)
            .where(Payment.status.in_(list(from_statuses)))
            .values(status=to_status, updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1


__all__ = ["PaymentRepository"]

# Fin del archivo app/modules/payments/repositories/payment_repository.py
