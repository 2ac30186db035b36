# -*- coding: utf-8 -*-
"""
app/modules/entitlements/models/purchase_models.py

Compra: entitlement permanente. Única por (user_id, content_id, content_type).

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime
from app.modules.entitlements.enums import ContentType
from app.modules.payments.utils.datetime_helpers import utcnow


class Purchase(Base):
    __tablename__ = "purchases"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(String(128), nullable=False)

    content_id: Mapped[str] = mapped_column(String(128), nullable=False)

    content_type: Mapped[ContentType] = mapped_column(ContentType.as_db_enum(), nullable=False)

    price_paid: Mapped[int] = mapped_column(Integer, nullable=False)

    payment_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "content_id", "content_type", name="uq_purchases_user_content"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<Purchase id={self.id} user_id={self.user_id} {self.content_type}:{self.content_id}>"


__all__ = ["Purchase"]
