# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhook_event_service.py

Registro durable de webhooks recibidos.

register_event es idempotente por event_key: dos entregas simultáneas
del mismo evento terminan apuntando a la misma fila.

Autor: ReelPass
Fecha: 16/09/2026
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.models.webhook_event_models import WebhookEvent
from app.modules.payments.repositories.webhook_event_repository import WebhookEventRepository

logger = logging.getLogger(__name__)


class WebhookEventService:
    def __init__(self, event_repo: Optional[WebhookEventRepository] = None) -> None:
        self.event_repo = event_repo or WebhookEventRepository()

    async def get_by_event_key(self, session: AsyncSession, event_key: str) -> Optional[WebhookEvent]:
        return await self.event_repo.get_by_event_key(session, event_key)

    async def register_event(
        self,
        session: AsyncSession,
        *,
        event_key: str,
        event_type: str,
        payload: Dict[str, Any],
        provider: str = "gateway",
        provider_event_id: Optional[str] = None,
        provider_reference: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> Tuple[WebhookEvent, bool]:
        """
        Registra el evento si no existe.

        Returns:
            (evento, creado_en_esta_llamada)
        """
        existing = await self.event_repo.get_by_event_key(session, event_key)
        if existing:
            return existing, False

        try:
            async with session.begin_nested():
                event = await self.event_repo.create(
                    session,
                    provider=provider,
                    event_type=event_type,
                    provider_event_id=provider_event_id,
                    provider_reference=provider_reference,
                    event_key=event_key,
                    payload=payload,
                    client_ip=client_ip,
                )
            return event, True
        except IntegrityError:
            existing = await self.event_repo.get_by_event_key(session, event_key)
            if existing is None:
                raise
            logger.info("Webhook event %s registered concurrently", event_key)
            return existing, False

    async def mark_processed(
        self,
        session: AsyncSession,
        event: WebhookEvent,
        *,
        processing_status: str,
        processing_message: Optional[str] = None,
    ) -> bool:
        return await self.event_repo.mark_processed(
            session,
            event.id,
            processing_status=processing_status,
            processing_message=processing_message,
        )


__all__ = ["WebhookEventService"]

# Fin del archivo app/modules/payments/services/webhook_event_service.py
