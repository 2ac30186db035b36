# -*- coding: utf-8 -*-
"""
app/modules/payments/models/webhook_event_models.py

Registro de callbacks recibidos de la pasarela.

- event_key: identidad de deduplicación (UNIQUE).
- processed_at: NULL hasta que el despacho termina; un evento sin
  processed_at es elegible para reintento.

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, JSONDocument, UTCDateTime
from app.modules.payments.utils.datetime_helpers import utcnow


class WebhookEvent(Base):
    __tablename__ = "webhook_events"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    provider: Mapped[str] = mapped_column(String(32), nullable=False, default="gateway")

    event_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    provider_event_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    provider_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)

    event_key: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        unique=True,
        doc="event_type:reference:event_id",
    )

    payload: Mapped[Dict[str, Any]] = mapped_column(JSONDocument, nullable=False, default=dict)

    client_ip: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    processing_status: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    processing_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    received_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    processed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    @property
    def is_processed(self) -> bool:
        return self.processed_at is not None

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<WebhookEvent id={self.id} key={self.event_key} processed={self.is_processed}>"


__all__ = ["WebhookEvent"]

# Fin del archivo app/modules/payments/models/webhook_event_models.py
