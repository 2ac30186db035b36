# -*- coding: utf-8 -*-
"""
app/modules/entitlements/services/entitlement_service.py

Resolver de entitlements: ¿puede el usuario ver este contenido ahora?

Regla:
- Hay acceso si existe una renta activa con expiration_date >= now
  o una compra del mismo (content_id, content_type).
- Si existen ambas, se reporta la compra (permanente gana).
- Episodios: unión del acceso directo al episodio y del acceso a su
  temporada (dos consultas; son tipos de contenido distintos).

Solo lee; nunca escribe rentas ni compras.

Autor: ReelPass
Fecha: 14/09/2026
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.enums import AccessType, ContentType
from app.modules.entitlements.models.purchase_models import Purchase
from app.modules.entitlements.models.rental_models import Rental
from app.modules.entitlements.repositories.purchase_repository import PurchaseRepository
from app.modules.entitlements.repositories.rental_repository import RentalRepository
from app.modules.payments.utils.datetime_helpers import utcnow


@dataclass(frozen=True)
class AccessResult:
    has_access: bool
    access_type: Optional[AccessType] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def denied(cls) -> "AccessResult":
        return cls(has_access=False)

    def union(self, other: "AccessResult") -> "AccessResult":
        """Combina dos resultados: compra gana; entre rentas, la que vence más tarde."""
        if AccessType.PURCHASE in (self.access_type, other.access_type):
            return AccessResult(has_access=True, access_type=AccessType.PURCHASE)
        if self.has_access and other.has_access:
            return self if self.expires_at >= other.expires_at else other
        return self if self.has_access else other


@dataclass
class ActiveEntitlements:
    rentals: List[Rental] = field(default_factory=list)
    purchases: List[Purchase] = field(default_factory=list)


class EntitlementResolver:
    def __init__(
        self,
        rental_repo: Optional[RentalRepository] = None,
        purchase_repo: Optional[PurchaseRepository] = None,
    ) -> None:
        self.rental_repo = rental_repo or RentalRepository()
        self.purchase_repo = purchase_repo or PurchaseRepository()

    async def find_active_rental(
        self,
        session: AsyncSession,
        user_id: str,
        content_id: str,
        content_type: ContentType,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[Rental]:
        return await self.rental_repo.get_active(
            session,
            user_id=user_id,
            content_id=content_id,
            content_type=content_type,
            now=now or utcnow(),
        )

    async def has_access(
        self,
        session: AsyncSession,
        user_id: str,
        content_id: str,
        content_type: ContentType,
        *,
        now: Optional[datetime] = None,
    ) -> AccessResult:
        purchase = await self.purchase_repo.get_for_content(
            session,
            user_id=user_id,
            content_id=content_id,
            content_type=content_type,
        )
        if purchase is not None:
            return AccessResult(has_access=True, access_type=AccessType.PURCHASE)

        rental = await self.find_active_rental(session, user_id, content_id, content_type, now=now)
        if rental is not None:
            return AccessResult(
                has_access=True,
                access_type=AccessType.RENTAL,
                expires_at=rental.expiration_date,
            )
        return AccessResult.denied()

    async def has_episode_access(
        self,
        session: AsyncSession,
        user_id: str,
        episode_id: str,
        season_id: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> AccessResult:
        now = now or utcnow()
        episode = await self.has_access(session, user_id, episode_id, ContentType.EPISODE, now=now)
        if season_id is None:
            return episode
        season = await self.has_access(session, user_id, season_id, ContentType.SEASON, now=now)
        return episode.union(season)

    async def list_active_entitlements(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> ActiveEntitlements:
        rentals = await self.rental_repo.list_active_for_user(session, user_id, now=now or utcnow())
        purchases = await self.purchase_repo.list_for_user(session, user_id)
        return ActiveEntitlements(rentals=list(rentals), purchases=list(purchases))


__all__ = ["AccessResult", "ActiveEntitlements", "EntitlementResolver"]

# Fin del archivo app/modules/entitlements/services/entitlement_service.py
