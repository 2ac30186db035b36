# -*- coding: utf-8 -*-
"""
app/modules/payments/services/wallet_ledger_service.py

Ledger de wallets: única vía para mover saldo.

apply_transaction hace, dentro de un savepoint:
1. UPDATE wallets SET balance = balance ± amount
   WHERE id = :id AND balance ± amount >= 0 RETURNING balance
2. INSERT del WalletTransaction con el saldo resultante

Si el UPDATE no toca filas no se inserta nada. El UPDATE condicional toma
el lock de fila: dos débitos concurrentes sobre la misma wallet se
serializan y el segundo reevalúa el saldo ya descontado. Wallets
distintas nunca compiten.

Autor: ReelPass
Fecha: 12/09/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import WalletTxType
from app.modules.payments.errors import InsufficientFundsError, NotFoundError, ValidationError
from app.modules.payments.metrics.exporters.prometheus_exporter import (
    observe_ledger_rejected,
    observe_ledger_transaction,
)
from app.modules.payments.models.wallet_transaction_models import WalletTransaction
from app.modules.payments.repositories.wallet_repository import WalletRepository
from app.modules.payments.repositories.wallet_transaction_repository import (
    WalletTransactionRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletReconciliation:
    wallet_id: int
    balance: int
    ledger_sum: int

    @property
    def is_consistent(self) -> bool:
        return self.balance == self.ledger_sum


class WalletLedger:
    """Primitiva atómica de crédito/débito con historial inmutable."""

    def __init__(
        self,
        wallet_repo: Optional[WalletRepository] = None,
        tx_repo: Optional[WalletTransactionRepository] = None,
    ) -> None:
        self.wallet_repo = wallet_repo or WalletRepository()
        self.tx_repo = tx_repo or WalletTransactionRepository()

    async def apply_transaction(
        self,
        session: AsyncSession,
        wallet_id: int,
        amount: int,
        tx_type: WalletTxType,
        description: str,
        payment_id: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> WalletTransaction:
        """
        Aplica un movimiento al saldo y lo registra en el ledger.

        Raises:
            ValidationError: monto no positivo
            NotFoundError: la wallet no existe
            InsufficientFundsError: el débito dejaría el saldo negativo
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Wallet transaction amount must be a positive integer")

        delta = tx_type.signed(amount)

        async with session.begin_nested():
            new_balance = await self.wallet_repo.apply_delta(session, wallet_id, delta)

            if new_balance is None:
                available = await self.wallet_repo.get_balance(session, wallet_id)
                if available is None:
                    raise NotFoundError(f"Wallet {wallet_id} not found")
                observe_ledger_rejected(tx_type.value)
                logger.info(
                    "Ledger rejected %s wallet_id=%s amount=%s available=%s",
                    tx_type.value,
                    wallet_id,
                    amount,
                    available,
                )
                raise InsufficientFundsError(
                    required=amount,
                    available=available,
                    context={"wallet_id": wallet_id, "payment_id": payment_id},
                )

            tx = await self.tx_repo.create(
                session,
                wallet_id=wallet_id,
                payment_id=payment_id,
                tx_type=tx_type,
                amount=amount,
                balance_after=new_balance,
                description=description,
                metadata_json=dict(metadata or {}),
            )

        observe_ledger_transaction(tx_type.value)
        logger.info(
            "Ledger %s wallet_id=%s amount=%s balance_after=%s payment_id=%s",
            tx_type.value,
            wallet_id,
            amount,
            new_balance,
            payment_id,
        )
        return tx

    async def get_history(
        self,
        session: AsyncSession,
        wallet_id: int,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[WalletTransaction]:
        return await self.tx_repo.list_by_wallet(session, wallet_id, limit=limit, offset=offset)

    async def reconcile(self, session: AsyncSession, wallet_id: int) -> WalletReconciliation:
        """Compara el saldo denormalizado con la suma firmada del ledger."""
        balance = await self.wallet_repo.get_balance(session, wallet_id)
        if balance is None:
            raise NotFoundError(f"Wallet {wallet_id} not found")
        ledger_sum = await self.tx_repo.compute_signed_sum(session, wallet_id)

        result = WalletReconciliation(wallet_id=wallet_id, balance=balance, ledger_sum=ledger_sum)
        if not result.is_consistent:
            logger.error(
                "Wallet %s out of balance: balance=%s ledger_sum=%s",
                wallet_id,
                balance,
                ledger_sum,
            )
        return result


__all__ = ["WalletLedger", "WalletReconciliation"]

# Fin del archivo app/modules/payments/services/wallet_ledger_service.py
