# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/wallet.py

Rutas de wallet.

Endpoints:
- GET  /wallet                                  → wallet del usuario (se crea con saldo 0)
- GET  /wallet/transactions                     → historial paginado del ledger
- POST /wallet/adjustments                      → ajuste manual (admin)
- GET  /wallet/{user_id}/reconciliation         → saldo vs ledger (admin)

Autor: ReelPass
Fecha: 19/09/2026
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import AuthenticatedUser, get_current_admin, get_current_user
from app.modules.payments.middleware import check_payment_rate_limit
from app.modules.payments.schemas import (
    PageMeta,
    WalletAdjustmentIn,
    WalletAdjustmentOut,
    WalletOut,
    WalletReconciliationOut,
    WalletTransactionOut,
    WalletTransactionsPage,
)
from app.modules.payments.repositories import WalletTransactionRepository
from app.modules.payments.services import WalletService
from app.shared.config.settings_payments import get_payments_settings
from app.shared.database.database import get_async_session

router = APIRouter(
    prefix="/wallet",
    tags=["payments:wallet"],
)


def get_wallet_service() -> WalletService:
    return WalletService(default_currency=get_payments_settings().default_currency)


@router.get("", response_model=WalletOut)
async def get_wallet(
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    wallet_service: WalletService = Depends(get_wallet_service),
):
    wallet = await wallet_service.get_or_create_wallet(session, user.user_id)
    await session.commit()
    return WalletOut.model_validate(wallet)


@router.get("/transactions", response_model=WalletTransactionsPage)
async def list_wallet_transactions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user: AuthenticatedUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
    wallet_service: WalletService = Depends(get_wallet_service),
):
    wallet = await wallet_service.get_wallet(session, user.user_id)
    items = await wallet_service.ledger.get_history(session, wallet.id, limit=limit, offset=offset)
    total = await WalletTransactionRepository().count_by_wallet(session, wallet.id)
    return WalletTransactionsPage(
        items=[WalletTransactionOut.model_validate(tx) for tx in items],
        meta=PageMeta.build(total=total, limit=limit, offset=offset),
    )


@router.post(
    "/adjustments",
    response_model=WalletAdjustmentOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(check_payment_rate_limit)],
)
async def create_wallet_adjustment(
    payload: WalletAdjustmentIn,
    admin: AuthenticatedUser = Depends(get_current_admin),
    session: AsyncSession = Depends(get_async_session),
    wallet_service: WalletService = Depends(get_wallet_service),
):
    wallet, tx = await wallet_service.admin_adjust(
        session,
        user_id=payload.user_id,
        amount=payload.amount,
        tx_type=payload.tx_type,
        reason=payload.reason,
        admin_id=admin.user_id,
        min_reason_length=get_payments_settings().admin_adjustment_min_reason_length,
    )
    await session.commit()
    return WalletAdjustmentOut(
        wallet=WalletOut.model_validate(wallet),
        transaction=WalletTransactionOut.model_validate(tx),
    )


@router.get("/{user_id}/reconciliation", response_model=WalletReconciliationOut)
async def reconcile_wallet(
    user_id: str,
    admin: AuthenticatedUser = Depends(get_current_admin),
    session: AsyncSession = Depends(get_async_session),
    wallet_service: WalletService = Depends(get_wallet_service),
):
    wallet = await wallet_service.get_wallet(session, user_id)
    result = await wallet_service.ledger.reconcile(session, wallet.id)
    return WalletReconciliationOut(
        wallet_id=result.wallet_id,
        balance=result.balance,
        ledger_sum=result.ledger_sum,
        is_consistent=result.is_consistent,
    )


# Fin del archivo app/modules/payments/routes/wallet.py
