# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/refunds.py

Reembolso administrativo de un pago completado (POST /payments/{id}/refund).

Flujo:
1. Validar motivo y estado (solo completed; refunded → conflicto)
2. En un savepoint:
   - transición guardada completed → refunded
   - revertir el efecto en la wallet:
       wallet (renta/compra)  → crédito `refund` del monto debitado
       pasarela (recarga)     → débito del monto acreditado
   - revocar el entitlement (renta → revoked, compra eliminada)
3. Pasarela: pedir el reembolso del cobro a la pasarela
4. Commit

Si la pasarela rechaza o no responde se hace rollback completo: el pago
sigue completed y el reembolso se puede reintentar.

Autor: ReelPass
Fecha: 26/09/2026
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.repositories.purchase_repository import PurchaseRepository
from app.modules.entitlements.repositories.rental_repository import RentalRepository
from app.modules.payments.adapters.gateway_client import GatewayClient, get_gateway_client
from app.modules.payments.enums import (
    PaymentProvider,
    PaymentPurpose,
    PaymentStatus,
    WalletTxType,
)
from app.modules.payments.errors import (
    ConflictError,
    NotFoundError,
    PaymentsError,
    ValidationError,
)
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.models.wallet_transaction_models import WalletTransaction
from app.modules.payments.repositories.wallet_transaction_repository import (
    WalletTransactionRepository,
)
from app.modules.payments.schemas.payment_schemas import PaymentRefundOut
from app.modules.payments.services.payment_service import PaymentService
from app.modules.payments.services.wallet_service import WalletService
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

logger = logging.getLogger(__name__)


class PaymentRefunder:
    """Reembolsos manuales disparados por un administrador."""

    def __init__(
        self,
        *,
        payment_service: Optional[PaymentService] = None,
        wallet_service: Optional[WalletService] = None,
        rental_repo: Optional[RentalRepository] = None,
        purchase_repo: Optional[PurchaseRepository] = None,
        tx_repo: Optional[WalletTransactionRepository] = None,
        gateway: Optional[GatewayClient] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self.payment_service = payment_service or PaymentService()
        self.wallet_service = wallet_service or WalletService(
            default_currency=self.settings.default_currency
        )
        self.rental_repo = rental_repo or RentalRepository()
        self.purchase_repo = purchase_repo or PurchaseRepository()
        self.tx_repo = tx_repo or WalletTransactionRepository()
        self._gateway = gateway

    @property
    def gateway(self) -> GatewayClient:
        if self._gateway is None:
            self._gateway = get_gateway_client()
        return self._gateway

    async def refund_payment(
        self,
        session: AsyncSession,
        payment_id: int,
        *,
        reason: str,
        admin_id: str,
    ) -> PaymentRefundOut:
        """
        Reembolsa un pago completado y hace commit.

        Raises:
            ValidationError: motivo demasiado corto o pago sin referencia
            NotFoundError: el pago no existe
            ConflictError: el pago no está completed (o ya se reembolsó)
            InsufficientFundsError: la recarga ya se gastó
            UpstreamError: la pasarela rechazó o no respondió
        """
        reason = (reason or "").strip()
        min_length = self.settings.refund_min_reason_length
        if len(reason) < min_length:
            raise ValidationError(f"Refund reason must be at least {min_length} characters")

        payment = await self.payment_service.get_payment(session, payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        if payment.status == PaymentStatus.REFUNDED:
            raise ConflictError("Payment already refunded", context={"payment_id": payment_id})
        if payment.status != PaymentStatus.COMPLETED:
            raise ConflictError(
                "Only completed payments can be refunded",
                context={"payment_id": payment_id, "status": payment.status.value},
            )
        if payment.provider == PaymentProvider.GATEWAY and not payment.provider_reference:
            raise ValidationError("Payment has no gateway reference to refund")

        # El rollback expira el objeto: lo necesario queda en locales
        purpose, provider = payment.purpose, payment.provider
        currency, reference = payment.currency, payment.provider_reference

        txs = await self.tx_repo.list_by_payment(session, payment_id)
        amount = self._refund_amount(payment, txs)

        try:
            async with session.begin_nested():
                refunded = await self.payment_service.mark_refunded(
                    session, payment, amount=amount, reason=reason
                )
                if not refunded:
                    raise ConflictError("Payment already refunded", context={"payment_id": payment_id})
                wallet_tx = await self._reverse_wallet_effect(
                    session, payment, txs, amount=amount, reason=reason, admin_id=admin_id
                )
                await self._revoke_entitlement(session, payment)

            gateway_refund_id = None
            if provider == PaymentProvider.GATEWAY:
                result = await self.gateway.refund_transaction(
                    reference=reference,
                    amount=amount,
                    currency=currency,
                    note=f"Refund by admin {admin_id}: {reason}",
                )
                gateway_refund_id = result.refund_id
        except PaymentsError as e:
            await session.rollback()
            logger.error(
                "Refund of payment %s failed: purpose=%s amount=%s error=%s",
                payment_id,
                purpose.value,
                amount,
                e.message,
            )
            raise

        await session.commit()
        self.payment_service.record_refunded(provider, purpose)
        logger.warning(
            "Admin %s refunded payment %s purpose=%s provider=%s amount=%s",
            admin_id,
            payment_id,
            purpose.value,
            provider.value,
            amount,
        )
        return PaymentRefundOut(
            payment_id=payment_id,
            status=PaymentStatus.REFUNDED,
            refunded_amount=amount,
            currency=currency,
            wallet_transaction_id=wallet_tx.id if wallet_tx else None,
            gateway_refund_id=gateway_refund_id,
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _refund_amount(payment: Payment, txs: Sequence[WalletTransaction]) -> int:
        """Lo que realmente movió el pago: el débito o la recarga confirmada."""
        match payment.provider:
            case PaymentProvider.WALLET:
                moved = sum(tx.amount for tx in txs if tx.tx_type == WalletTxType.DEBIT)
            case PaymentProvider.GATEWAY:
                moved = sum(tx.amount for tx in txs if tx.tx_type == WalletTxType.CREDIT)
        return moved or payment.amount

    async def _reverse_wallet_effect(
        self,
        session: AsyncSession,
        payment: Payment,
        txs: Sequence[WalletTransaction],
        *,
        amount: int,
        reason: str,
        admin_id: str,
    ) -> Optional[WalletTransaction]:
        metadata = {"admin_id": admin_id, "reason": reason, "source": "payment_refund"}

        if payment.provider == PaymentProvider.WALLET:
            wallet_id = txs[0].wallet_id if txs else (
                await self.wallet_service.get_or_create_wallet(session, payment.user_id)
            ).id
            return await self.wallet_service.ledger.apply_transaction(
                session,
                wallet_id,
                amount,
                WalletTxType.REFUND,
                f"Refund of payment {payment.id}",
                payment_id=payment.id,
                metadata=metadata,
            )

        if payment.purpose == PaymentPurpose.WALLET_TOPUP and txs:
            return await self.wallet_service.ledger.apply_transaction(
                session,
                txs[0].wallet_id,
                amount,
                WalletTxType.DEBIT,
                f"Refund reversal of top-up payment {payment.id}",
                payment_id=payment.id,
                metadata=metadata,
            )
        return None

    async def _revoke_entitlement(self, session: AsyncSession, payment: Payment) -> None:
        match payment.purpose:
            case PaymentPurpose.RENTAL:
                revoked = await self.rental_repo.revoke_for_payment(session, payment.id)
                logger.info("Payment %s refund revoked %s rental(s)", payment.id, revoked)
            case PaymentPurpose.PURCHASE:
                removed = await self.purchase_repo.delete_for_payment(session, payment.id)
                logger.info("Payment %s refund removed %s purchase(s)", payment.id, removed)
            case PaymentPurpose.WALLET_TOPUP | PaymentPurpose.SUBSCRIPTION:
                return


__all__ = ["PaymentRefunder"]

# Fin del archivo app/modules/payments/facades/payments/refunds.py
