# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/process_payment.py

Orquestador de POST /payments.

Flujo:
1. Sanitizar y validar (sin efectos secundarios si falla)
2. Idempotencia por key (replay o conflicto)
3. Chequeos de conflicto de contenido (renta activa, compra existente)
4. Camino wallet: débito + completion + fulfillment en un savepoint
5. Camino pasarela: registrar el pago, inicializar la transacción y
   dejarlo pending; el fulfillment lo dispara el webhook

Este facade hace commit: cada pago creado queda persistido aunque la
pasarela falle después.

Autor: ReelPass
Fecha: 17/09/2026
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.repositories.purchase_repository import PurchaseRepository
from app.modules.entitlements.repositories.rental_repository import RentalRepository
from app.modules.entitlements.services.fulfillment_service import FulfillmentService
from app.modules.payments.adapters.gateway_client import GatewayClient, get_gateway_client
from app.modules.payments.enums import (
    PaymentMethod,
    PaymentProvider,
    PaymentPurpose,
    PaymentStatus,
    WalletTxType,
)
from app.modules.payments.errors import (
    ConflictError,
    FulfillmentError,
    InsufficientFundsError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from app.modules.payments.facades.payments.completion import claim_and_fulfill
from app.modules.payments.facades.payments.validators import parse_payment_request
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.repositories.wallet_transaction_repository import (
    WalletTransactionRepository,
)
from app.modules.payments.schemas.payment_schemas import PaymentRequest, PaymentResult
from app.modules.payments.services.payment_service import PaymentService
from app.modules.payments.services.wallet_service import WalletService
from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

logger = logging.getLogger(__name__)


def mint_idempotency_key(purpose: PaymentPurpose, user_id: str) -> str:
    """Key `purpose_userid_timestamp_random` para pagos sin key del cliente."""
    return f"{purpose.value}_{user_id}_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class PaymentProcessor:
    """Punto de entrada único para iniciar pagos."""

    def __init__(
        self,
        *,
        payment_service: Optional[PaymentService] = None,
        wallet_service: Optional[WalletService] = None,
        fulfillment: Optional[FulfillmentService] = None,
        gateway: Optional[GatewayClient] = None,
        rental_repo: Optional[RentalRepository] = None,
        purchase_repo: Optional[PurchaseRepository] = None,
        tx_repo: Optional[WalletTransactionRepository] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self.payment_service = payment_service or PaymentService()
        self.wallet_service = wallet_service or WalletService(
            default_currency=self.settings.default_currency
        )
        self.rental_repo = rental_repo or RentalRepository()
        self.purchase_repo = purchase_repo or PurchaseRepository()
        self.fulfillment = fulfillment or FulfillmentService(
            rental_repo=self.rental_repo,
            purchase_repo=self.purchase_repo,
            wallet_service=self.wallet_service,
            settings=self.settings,
        )
        self.tx_repo = tx_repo or WalletTransactionRepository()
        self._gateway = gateway

    @property
    def gateway(self) -> GatewayClient:
        if self._gateway is None:
            self._gateway = get_gateway_client()
        return self._gateway

    # ------------------------------------------------------------------ #
    # API pública
    # ------------------------------------------------------------------ #
    async def process_payment(
        self,
        session: AsyncSession,
        user_id: str,
        raw_request: Mapping[str, Any],
        idempotency_key: Optional[str] = None,
    ) -> PaymentResult:
        """
        Valida y procesa una solicitud de pago.

        Raises:
            ValidationError, ConflictError, InsufficientFundsError,
            UpstreamError, FulfillmentError
        """
        request = parse_payment_request(
            raw_request,
            idempotency_key=idempotency_key,
            min_amount=self.settings.min_payment_amount,
            max_amount=self.settings.max_payment_amount,
            default_currency=self.settings.default_currency,
        )

        if request.purpose == PaymentPurpose.SUBSCRIPTION:
            raise ValidationError("Subscriptions are not supported by this endpoint")

        if request.idempotency_key:
            existing = await self.payment_service.get_by_idempotency_key(
                session, request.idempotency_key
            )
            if existing is not None:
                return await self._replay(session, existing, user_id, request)

        await self._check_content_conflicts(session, user_id, request)

        match request.payment_method:
            case PaymentMethod.WALLET:
                return await self._process_wallet(session, user_id, request)
            case PaymentMethod.CARD:
                return await self._process_gateway(session, user_id, request)

    # ------------------------------------------------------------------ #
    # Idempotencia
    # ------------------------------------------------------------------ #
    async def _replay(
        self,
        session: AsyncSession,
        payment: Payment,
        user_id: str,
        request: PaymentRequest,
    ) -> PaymentResult:
        if (
            payment.user_id != user_id
            or payment.purpose != request.purpose
            or payment.amount != request.amount
        ):
            logger.warning(
                "Idempotency key reused with a different request: payment=%s user=%s",
                payment.id,
                user_id,
            )
            raise ConflictError(
                "Idempotency key already used with a different request",
                context={"payment_id": payment.id},
            )

        wallet_tx_id = None
        if payment.provider == PaymentProvider.WALLET:
            txs = await self.tx_repo.list_by_payment(session, payment.id)
            wallet_tx_id = txs[0].id if txs else None

        logger.info("Idempotent replay for payment %s", payment.id)
        return PaymentResult(
            success=payment.status != PaymentStatus.FAILED,
            payment_id=payment.id,
            status=payment.status,
            checkout_url=payment.checkout_url,
            wallet_transaction_id=wallet_tx_id,
            error=payment.error_message if payment.status == PaymentStatus.FAILED else None,
            replayed=True,
        )

    async def _create_or_replay(
        self,
        session: AsyncSession,
        user_id: str,
        request: PaymentRequest,
        *,
        provider: PaymentProvider,
        status: PaymentStatus,
        idempotency_key: str,
        provider_reference: Optional[str] = None,
    ) -> Payment | PaymentResult:
        """
        Inserta el pago; si otra request ganó la misma key, devuelve su replay.
        """
        try:
            async with session.begin_nested():
                return await self.payment_service.create_payment(
                    session,
                    user_id=user_id,
                    amount=request.amount,
                    currency=request.currency,
                    purpose=request.purpose,
                    provider=provider,
                    status=status,
                    metadata=request.metadata.to_storage(),
                    email=request.email,
                    idempotency_key=idempotency_key,
                    provider_reference=provider_reference,
                )
        except IntegrityError:
            existing = await self.payment_service.get_by_idempotency_key(session, idempotency_key)
            if existing is None:
                raise
            return await self._replay(session, existing, user_id, request)

    # ------------------------------------------------------------------ #
    # Conflictos de contenido
    # ------------------------------------------------------------------ #
    async def _check_content_conflicts(
        self,
        session: AsyncSession,
        user_id: str,
        request: PaymentRequest,
    ) -> None:
        metadata = request.metadata
        match request.purpose:
            case PaymentPurpose.RENTAL:
                rental = await self.rental_repo.get_active(
                    session,
                    user_id=user_id,
                    content_id=metadata.content_id,
                    content_type=metadata.content_type,
                    now=utcnow(),
                )
                if rental is not None:
                    raise ConflictError(
                        "You already have an active rental for this content",
                        context={"rental_id": rental.id},
                    )
            case PaymentPurpose.PURCHASE:
                purchase = await self.purchase_repo.get_for_content(
                    session,
                    user_id=user_id,
                    content_id=metadata.content_id,
                    content_type=metadata.content_type,
                )
                if purchase is not None:
                    raise ConflictError(
                        "You already own this content",
                        context={"purchase_id": purchase.id},
                    )
            case PaymentPurpose.WALLET_TOPUP | PaymentPurpose.SUBSCRIPTION:
                return

    # ------------------------------------------------------------------ #
    # Camino wallet
    # ------------------------------------------------------------------ #
    async def _process_wallet(
        self,
        session: AsyncSession,
        user_id: str,
        request: PaymentRequest,
    ) -> PaymentResult:
        wallet = await self.wallet_service.get_or_create_wallet(session, user_id)
        if wallet.currency != request.currency:
            await session.commit()
            raise ValidationError(
                f"Wallet payments must be made in {wallet.currency}",
                context={"user_id": user_id, "currency": request.currency},
            )
        if wallet.balance < request.amount:
            await session.commit()
            raise InsufficientFundsError(
                required=request.amount,
                available=wallet.balance,
                context={"user_id": user_id, "purpose": request.purpose.value},
            )

        created = await self._create_or_replay(
            session,
            user_id,
            request,
            provider=request.payment_method.provider,
            status=PaymentStatus.PROCESSING,
            idempotency_key=request.idempotency_key or mint_idempotency_key(request.purpose, user_id),
        )
        if isinstance(created, PaymentResult):
            return created
        payment = created
        payment_id = payment.id

        try:
            async with session.begin_nested():
                tx = await self.wallet_service.ledger.apply_transaction(
                    session,
                    wallet.id,
                    request.amount,
                    WalletTxType.DEBIT,
                    f"Payment for {request.purpose.value}",
                    payment_id=payment_id,
                    metadata={"purpose": request.purpose.value},
                )
                wallet_tx_id = tx.id
                outcome = await claim_and_fulfill(
                    session,
                    payment,
                    payment_service=self.payment_service,
                    fulfillment=self.fulfillment,
                )
                if outcome is None:
                    raise FulfillmentError(
                        "Payment left processing before completion",
                        context={"payment_id": payment_id},
                    )
        except (InsufficientFundsError, NotFoundError, FulfillmentError) as e:
            payment = await self.payment_service.get_payment(session, payment_id)
            await self.payment_service.mark_failed(session, payment, e.message)
            await session.commit()
            if isinstance(e, FulfillmentError):
                logger.error(
                    "Wallet payment %s rolled back: purpose=%s amount=%s error=%s",
                    payment_id,
                    request.purpose.value,
                    request.amount,
                    e.message,
                )
            raise

        await session.commit()
        payment = await self.payment_service.get_payment(session, payment_id)
        self.payment_service.record_completed(payment)
        logger.info(
            "Wallet payment %s completed user=%s purpose=%s amount=%s",
            payment_id,
            user_id,
            request.purpose.value,
            request.amount,
        )
        return PaymentResult(
            success=True,
            payment_id=payment_id,
            status=payment.status,
            wallet_transaction_id=wallet_tx_id,
        )

    # ------------------------------------------------------------------ #
    # Camino pasarela
    # ------------------------------------------------------------------ #
    async def _process_gateway(
        self,
        session: AsyncSession,
        user_id: str,
        request: PaymentRequest,
    ) -> PaymentResult:
        reference = request.idempotency_key or mint_idempotency_key(request.purpose, user_id)

        created = await self._create_or_replay(
            session,
            user_id,
            request,
            provider=request.payment_method.provider,
            status=PaymentStatus.INITIATED,
            idempotency_key=reference,
            provider_reference=reference,
        )
        if isinstance(created, PaymentResult):
            return created
        payment = created
        payment_id = payment.id
        await session.commit()

        try:
            init = await self.gateway.initialize_transaction(
                email=request.email,
                amount=request.amount,
                currency=request.currency,
                reference=reference,
                metadata={
                    "payment_id": payment_id,
                    "user_id": user_id,
                    "purpose": request.purpose.value,
                    **request.metadata.to_storage(),
                },
            )
        except UpstreamError as e:
            e.context.update(
                payment_id=payment_id,
                purpose=request.purpose.value,
                amount=request.amount,
            )
            if e.timed_out:
                logger.error(
                    "Gateway initialize timed out for payment %s; left initiated",
                    payment_id,
                )
                raise
            logger.error(
                "Gateway rejected payment %s purpose=%s amount=%s raw=%s",
                payment_id,
                request.purpose.value,
                request.amount,
                e.raw_response,
            )
            await self.payment_service.mark_failed(session, payment, f"Gateway rejected: {e.message}")
            await session.commit()
            raise

        await self.payment_service.mark_pending(
            session,
            payment,
            provider_reference=init.reference,
            checkout_url=init.checkout_url,
        )
        await session.commit()
        logger.info(
            "Gateway checkout created payment=%s reference=%s",
            payment_id,
            init.reference,
        )
        return PaymentResult(
            success=True,
            payment_id=payment_id,
            status=PaymentStatus.PENDING,
            checkout_url=init.checkout_url,
        )


__all__ = ["PaymentProcessor", "mint_idempotency_key"]

# Fin del archivo app/modules/payments/facades/payments/process_payment.py
