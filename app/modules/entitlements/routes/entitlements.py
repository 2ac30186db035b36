# -*- coding: utf-8 -*-
"""
app/modules/entitlements/routes/entitlements.py

Endpoints:
- POST /entitlements/access  → ¿el usuario puede ver este contenido?
- GET  /entitlements         → rentas vigentes y compras del usuario

Autor: ReelPass
Fecha: 19/09/2026
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import AuthenticatedUser, get_current_user
from app.modules.entitlements.enums import ContentType
from app.modules.entitlements.schemas import (
    AccessCheckIn,
    AccessCheckOut,
    EntitlementsOut,
    PurchaseOut,
    RentalOut,
)
from app.modules.entitlements.services import EntitlementResolver
from app.shared.database.database import get_async_session

router = APIRouter(
    prefix="/entitlements",
    tags=["entitlements"],
)


def get_entitlement_resolver() -> EntitlementResolver:
    return EntitlementResolver()


@router.post("/access", response_model=AccessCheckOut)
async def check_access(
    payload: AccessCheckIn,
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    resolver: EntitlementResolver = Depends(get_entitlement_resolver),
):
    """
    Resuelve el acceso a un contenido.

    Para episodios con season_id también cuenta la renta o compra de la temporada.
    """
    if payload.content_type == ContentType.EPISODE and payload.season_id:
        result = await resolver.has_episode_access(
            session,
            user.user_id,
            payload.content_id,
            payload.season_id,
        )
    else:
        result = await resolver.has_access(
            session,
            user.user_id,
            payload.content_id,
            payload.content_type,
        )
    return AccessCheckOut(
        has_access=result.has_access,
        access_type=result.access_type,
        expires_at=result.expires_at,
    )


@router.get("", response_model=EntitlementsOut)
async def list_entitlements(
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    resolver: EntitlementResolver = Depends(get_entitlement_resolver),
):
    active = await resolver.list_active_entitlements(session, user.user_id)
    return EntitlementsOut(
        rentals=[RentalOut.model_validate(r) for r in active.rentals],
        purchases=[PurchaseOut.model_validate(p) for p in active.purchases],
    )


# Fin del archivo app/modules/entitlements/routes/entitlements.py
