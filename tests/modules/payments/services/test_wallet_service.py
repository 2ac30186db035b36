# tests/modules/payments/services/test_wallet_service.py
# -*- coding: utf-8 -*-
"""
Suite: WalletService
Objetivo:
  - Una wallet por usuario, creada perezosamente con saldo 0
  - Ajustes administrativos vía ledger con motivo obligatorio
"""

import pytest

from app.modules.payments.enums import WalletTxType
from app.modules.payments.errors import InsufficientFundsError, NotFoundError, ValidationError
from app.modules.payments.services import WalletService


async def test_get_or_create_wallet_is_idempotent(db_session):
    service = WalletService()

    first = await service.get_or_create_wallet(db_session, "user-lazy")
    second = await service.get_or_create_wallet(db_session, "user-lazy")
    await db_session.commit()

    assert first.id == second.id
    assert first.balance == 0
    assert first.currency == "NGN"


async def test_get_wallet_missing_raises_not_found(db_session):
    with pytest.raises(NotFoundError):
        await WalletService().get_wallet(db_session, "nobody")


async def test_admin_credit_records_reason_and_admin(db_session):
    service = WalletService()

    wallet, tx = await service.admin_adjust(
        db_session,
        user_id="user-adjusted",
        amount=2500,
        tx_type=WalletTxType.CREDIT,
        reason="Goodwill credit for outage",
        admin_id="admin-1",
    )
    await db_session.commit()

    assert wallet.balance == 2500
    assert tx.description == "Admin adjustment: Goodwill credit for outage"
    assert tx.metadata_json["admin_id"] == "admin-1"
    assert tx.metadata_json["source"] == "admin_adjustment"


async def test_admin_adjust_requires_meaningful_reason(db_session):
    with pytest.raises(ValidationError):
        await WalletService().admin_adjust(
            db_session,
            user_id="user-adjusted",
            amount=100,
            tx_type=WalletTxType.CREDIT,
            reason="  oops  ",
            admin_id="admin-1",
        )


async def test_admin_debit_cannot_overdraw(db_session):
    service = WalletService()
    await service.admin_adjust(
        db_session,
        user_id="user-overdraw",
        amount=1000,
        tx_type=WalletTxType.CREDIT,
        reason="Initial manual credit",
        admin_id="admin-1",
    )

    with pytest.raises(InsufficientFundsError):
        await service.admin_adjust(
            db_session,
            user_id="user-overdraw",
            amount=1500,
            tx_type=WalletTxType.DEBIT,
            reason="Chargeback recovery",
            admin_id="admin-1",
        )

    wallet = await service.get_wallet(db_session, "user-overdraw")
    assert wallet.balance == 1000


# Fin del archivo tests/modules/payments/services/test_wallet_service.py
