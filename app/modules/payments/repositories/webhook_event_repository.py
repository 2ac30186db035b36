# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/webhook_event_repository.py

Repositorio para la tabla webhook_events.

Responsabilidades:
- Deduplicación durable por event_key
- Marcado de procesamiento al terminar el despacho

Autor: ReelPass
Fecha: 07/09/2026
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.models.webhook_event_models import WebhookEvent
from app.modules.payments.utils.datetime_helpers import utcnow


class WebhookEventRepository(BaseRepository[WebhookEvent]):
    def __init__(self) -> None:
        super().__init__(WebhookEvent)

    async def get_by_event_key(
        self,
        session: AsyncSession,
        event_key: str,
    ) -> Optional[WebhookEvent]:
        stmt = (
            select(WebhookEvent)
            .where(WebhookEvent.event_key == event_key)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def mark_processed(
        self,
        session: AsyncSession,
        event_id: int,
        *,
        processing_status: str,
        processing_message: Optional[str] = None,
    ) -> bool:
        """Marca el evento como procesado una sola vez (processed_at IS NULL)."""
        stmt = (
            update(WebhookEvent)
            .where(WebhookEvent.id == event_id)
            .where(WebhookEvent.processed_at.is_(None))
            .values(
                processed_at=utcnow(),
                processing_status=processing_status,
                processing_message=processing_message,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1


__all__ = ["WebhookEventRepository"]

# Fin del archivo app/modules/payments/repositories/webhook_event_repository.py
