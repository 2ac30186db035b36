# -*- coding: utf-8 -*-
"""
app/modules/payments/services/wallet_service.py

Servicio para operaciones de alto nivel sobre wallets.

Autor: ReelPass
Fecha: 12/09/2026
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import WalletTxType
from app.modules.payments.errors import NotFoundError, ValidationError
from app.modules.payments.models.wallet_models import Wallet
from app.modules.payments.models.wallet_transaction_models import WalletTransaction
from app.modules.payments.repositories.wallet_repository import WalletRepository
from app.modules.payments.services.wallet_ledger_service import WalletLedger

logger = logging.getLogger(__name__)


class WalletService:
    """
    Acceso a la wallet del usuario.
    No modifica el saldo directamente; eso se hace en WalletLedger.
    """

    def __init__(
        self,
        wallet_repo: Optional[WalletRepository] = None,
        ledger: Optional[WalletLedger] = None,
        default_currency: str = "NGN",
    ) -> None:
        self.wallet_repo = wallet_repo or WalletRepository()
        self.ledger = ledger or WalletLedger(wallet_repo=self.wallet_repo)
        self.default_currency = default_currency

    # ---------------------------------------------------------
    # Obtener o crear wallet del usuario
    # ---------------------------------------------------------
    async def get_or_create_wallet(self, session: AsyncSession, user_id: str) -> Wallet:
        """
        Wallet del usuario; la crea con saldo 0 si no existe.

        Dos requests simultáneas del mismo usuario: la que pierde el
        INSERT (UNIQUE user_id) vuelve a leer la wallet ganadora.
        """
        wallet = await self.wallet_repo.get_by_user_id(session, user_id)
        if wallet:
            return wallet

        try:
            async with session.begin_nested():
                wallet = await self.wallet_repo.create(
                    session,
                    user_id=user_id,
                    balance=0,
                    currency=self.default_currency,
                )
            logger.info("Wallet created for user %s wallet_id=%s", user_id, wallet.id)
            return wallet
        except IntegrityError:
            wallet = await self.wallet_repo.get_by_user_id(session, user_id)
            if wallet is None:
                raise
            return wallet

    async def get_wallet(self, session: AsyncSession, user_id: str) -> Wallet:
        wallet = await self.wallet_repo.get_by_user_id(session, user_id)
        if wallet is None:
            raise NotFoundError("User wallet not found")
        return wallet

    # ---------------------------------------------------------
    # Ajustes administrativos
    # ---------------------------------------------------------
    async def admin_adjust(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        amount: int,
        tx_type: WalletTxType,
        reason: str,
        admin_id: str,
        min_reason_length: int = 10,
    ) -> Tuple[Wallet, WalletTransaction]:
        """
        Crédito/débito manual. El motivo queda en la descripción y el
        admin en la metadata del movimiento.
        """
        reason = (reason or "").strip()
        if len(reason) < min_reason_length:
            raise ValidationError(
                f"Adjustment reason must be at least {min_reason_length} characters"
            )

        wallet = await self.get_or_create_wallet(session, user_id)
        tx = await self.ledger.apply_transaction(
            session,
            wallet.id,
            amount,
            tx_type,
            f"Admin adjustment: {reason}",
            metadata={"admin_id": admin_id, "reason": reason, "source": "admin_adjustment"},
        )
        logger.warning(
            "Admin %s applied %s of %s to wallet %s (user %s)",
            admin_id,
            tx_type.value,
            amount,
            wallet.id,
            user_id,
        )
        wallet = await self.wallet_repo.get(session, wallet.id)
        return wallet, tx


__all__ = ["WalletService"]

# Fin del archivo app/modules/payments/services/wallet_service.py
