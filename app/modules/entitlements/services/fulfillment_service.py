# -*- coding: utf-8 -*-
"""
app/modules/entitlements/services/fulfillment_service.py

Fulfillment: otorga lo que se pagó cuando un Payment pasa a `completed`.

- wallet_topup → crédito en el ledger por el monto confirmado
- rental       → Rental activa con expiración now + duración
- purchase     → Purchase permanente
- subscription → sin fulfillment (FulfillmentError)

Cualquier fallo se reporta como FulfillmentError; quien invoca decide
el rollback y marca el pago como failed.

Autor: ReelPass
Fecha: 14/09/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.enums import ContentType, RentalStatus
from app.modules.entitlements.repositories.purchase_repository import PurchaseRepository
from app.modules.entitlements.repositories.rental_repository import RentalRepository
from app.modules.payments.enums import PaymentProvider, PaymentPurpose, WalletTxType
from app.modules.payments.errors import FulfillmentError, PaymentsError
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.schemas.metadata_schemas import (
    PurchaseMetadata,
    RentalMetadata,
    parse_metadata,
)
from app.modules.payments.services.wallet_service import WalletService
from app.modules.payments.utils.datetime_helpers import add_hours, utcnow
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FulfillmentOutcome:
    purpose: PaymentPurpose
    rental_id: Optional[int] = None
    purchase_id: Optional[int] = None
    wallet_transaction_id: Optional[int] = None
    expires_at: Optional[datetime] = None


def rental_duration_hours(
    content_type: ContentType,
    requested_hours: Optional[int] = None,
    settings: Optional[PaymentsSettings] = None,
) -> int:
    """Horas de renta: las pedidas en la metadata o las del tipo de contenido."""
    if requested_hours:
        return requested_hours
    settings = settings or get_payments_settings()
    match content_type:
        case ContentType.MOVIE:
            return settings.rental_hours_movie
        case ContentType.EPISODE:
            return settings.rental_hours_episode
        case ContentType.SEASON:
            return settings.rental_hours_season


class FulfillmentService:
    def __init__(
        self,
        rental_repo: Optional[RentalRepository] = None,
        purchase_repo: Optional[PurchaseRepository] = None,
        wallet_service: Optional[WalletService] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.rental_repo = rental_repo or RentalRepository()
        self.purchase_repo = purchase_repo or PurchaseRepository()
        self.wallet_service = wallet_service or WalletService()
        self.settings = settings or get_payments_settings()

    async def fulfill(
        self,
        session: AsyncSession,
        payment: Payment,
        *,
        confirmed_amount: Optional[int] = None,
    ) -> FulfillmentOutcome:
        """
        Ejecuta el fulfillment del propósito del pago.

        Args:
            confirmed_amount: monto que confirmó la pasarela (recargas);
                si falta se usa payment.amount.

        Raises:
            FulfillmentError
        """
        context = {
            "payment_id": payment.id,
            "purpose": payment.purpose.value,
            "amount": payment.amount,
        }
        try:
            metadata = parse_metadata(payment.purpose, payment.metadata_json)
        except PydanticValidationError as e:
            raise FulfillmentError(f"Invalid {payment.purpose.value} metadata: {e}", context=context) from e

        try:
            match payment.purpose:
                case PaymentPurpose.WALLET_TOPUP:
                    return await self._fulfill_topup(session, payment, confirmed_amount)
                case PaymentPurpose.RENTAL:
                    return await self._fulfill_rental(session, payment, metadata)
                case PaymentPurpose.PURCHASE:
                    return await self._fulfill_purchase(session, payment, metadata)
                case PaymentPurpose.SUBSCRIPTION:
                    raise FulfillmentError("Subscriptions have no fulfillment", context=context)
        except FulfillmentError:
            raise
        except (PaymentsError, IntegrityError) as e:
            raise FulfillmentError(f"Fulfillment failed: {e}", context=context) from e

    # ------------------------------------------------------------------
    # Ramas por propósito
    # ------------------------------------------------------------------
    async def _fulfill_topup(
        self,
        session: AsyncSession,
        payment: Payment,
        confirmed_amount: Optional[int],
    ) -> FulfillmentOutcome:
        if payment.provider == PaymentProvider.WALLET:
            raise FulfillmentError(
                "Wallet top-up cannot be funded from the wallet",
                context={"payment_id": payment.id},
            )

        amount = confirmed_amount if confirmed_amount is not None else payment.amount
        wallet = await self.wallet_service.get_or_create_wallet(session, payment.user_id)
        tx = await self.wallet_service.ledger.apply_transaction(
            session,
            wallet.id,
            amount,
            WalletTxType.CREDIT,
            "Wallet top-up via gateway",
            payment_id=payment.id,
            metadata={"source": "gateway_webhook", "reference": payment.provider_reference},
        )
        return FulfillmentOutcome(purpose=payment.purpose, wallet_transaction_id=tx.id)

    async def _fulfill_rental(
        self,
        session: AsyncSession,
        payment: Payment,
        metadata: RentalMetadata,
    ) -> FulfillmentOutcome:
        now = utcnow()
        existing = await self.rental_repo.get_active(
            session,
            user_id=payment.user_id,
            content_id=metadata.content_id,
            content_type=metadata.content_type,
            now=now,
        )
        if existing is not None:
            raise FulfillmentError(
                "Active rental already exists for this content",
                context={"payment_id": payment.id, "rental_id": existing.id},
            )

        hours = rental_duration_hours(metadata.content_type, metadata.rental_duration, self.settings)
        rental = await self.rental_repo.create(
            session,
            user_id=payment.user_id,
            content_id=metadata.content_id,
            content_type=metadata.content_type,
            price_paid=payment.amount,
            payment_id=payment.id,
            expiration_date=add_hours(now, hours),
            status=RentalStatus.ACTIVE,
        )
        logger.info(
            "Rental %s granted user=%s %s:%s hours=%s payment=%s",
            rental.id,
            payment.user_id,
            metadata.content_type.value,
            metadata.content_id,
            hours,
            payment.id,
        )
        return FulfillmentOutcome(
            purpose=payment.purpose,
            rental_id=rental.id,
            expires_at=rental.expiration_date,
        )

    async def _fulfill_purchase(
        self,
        session: AsyncSession,
        payment: Payment,
        metadata: PurchaseMetadata,
    ) -> FulfillmentOutcome:
        purchase = await self.purchase_repo.create(
            session,
            user_id=payment.user_id,
            content_id=metadata.content_id,
            content_type=metadata.content_type,
            price_paid=payment.amount,
            payment_id=payment.id,
        )
        logger.info(
            "Purchase %s granted user=%s %s:%s payment=%s",
            purchase.id,
            payment.user_id,
            metadata.content_type.value,
            metadata.content_id,
            payment.id,
        )
        return FulfillmentOutcome(purpose=payment.purpose, purchase_id=purchase.id)


__all__ = ["FulfillmentOutcome", "FulfillmentService", "rental_duration_hours"]

# Fin del archivo app/modules/entitlements/services/fulfillment_service.py
