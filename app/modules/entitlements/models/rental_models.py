# -*- coding: utf-8 -*-
"""
app/modules/entitlements/models/rental_models.py

Renta: entitlement con vencimiento.

Invariante: a lo sumo una renta activa y no vencida por
(user_id, content_id, content_type). Se valida antes de crear
(PaymentProcessor y FulfillmentService).

Autor: ReelPass
Fecha: 06/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, BigIntPK, UTCDateTime
from app.modules.entitlements.enums import ContentType, RentalStatus
from app.modules.payments.utils.datetime_helpers import utcnow


class Rental(Base):
    __tablename__ = "rentals"

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

    expiration_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    status: Mapped[RentalStatus] = mapped_column(
        RentalStatus.as_db_enum(),
        nullable=False,
        default=RentalStatus.ACTIVE,
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_rentals_lookup", "user_id", "content_id", "content_type", "status"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<Rental id={self.id} user_id={self.user_id} "
            f"{self.content_type}:{self.content_id} expires={self.expiration_date}>"
        )


__all__ = ["Rental"]
