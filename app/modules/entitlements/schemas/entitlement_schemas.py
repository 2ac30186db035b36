# -*- coding: utf-8 -*-
"""
app/modules/entitlements/schemas/entitlement_schemas.py

Esquemas de entrada/salida de entitlements.

Autor: ReelPass
Fecha: 19/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.modules.entitlements.enums import AccessType, ContentType, RentalStatus


class AccessCheckIn(BaseModel):
    """Body de POST /entitlements/access."""

    content_id: str = Field(min_length=1, max_length=128)
    content_type: ContentType
    season_id: Optional[str] = Field(
        default=None,
        max_length=128,
        description="Temporada del episodio; habilita el acceso heredado de la temporada",
    )

    @field_validator("content_id", "season_id", mode="before")
    @classmethod
    def _coerce_ids(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v.strip() if isinstance(v, str) else v


class AccessCheckOut(BaseModel):
    has_access: bool
    access_type: Optional[AccessType] = None
    expires_at: Optional[datetime] = None


class RentalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content_id: str
    content_type: ContentType
    price_paid: int
    payment_id: Optional[int] = None
    expiration_date: datetime
    status: RentalStatus
    created_at: datetime


class PurchaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content_id: str
    content_type: ContentType
    price_paid: int
    payment_id: Optional[int] = None
    created_at: datetime


class EntitlementsOut(BaseModel):
    """Biblioteca del usuario: rentas vigentes y compras."""

    rentals: List[RentalOut] = Field(default_factory=list)
    purchases: List[PurchaseOut] = Field(default_factory=list)


__all__ = [
    "AccessCheckIn",
    "AccessCheckOut",
    "RentalOut",
    "PurchaseOut",
    "EntitlementsOut",
]

# Fin del archivo app/modules/entitlements/schemas/entitlement_schemas.py
