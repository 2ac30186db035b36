# tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests para ReelPass.

- Variables de entorno de test antes de importar la app
- Base SQLite (aiosqlite) por test en tmp_path: cada test arranca con
  las tablas vacías y sin estado compartido
- async_client con lifespan (LifespanManager + ASGITransport)
- auth_headers: factory de headers Bearer con JWT firmado
- Pasarela falsa (AsyncMock) inyectada en el PaymentProcessor
"""

import json
import os
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

# -----------------------------------------------------------------------------
# 0) Entorno de test (antes de cualquier import de app.*)
# -----------------------------------------------------------------------------
os.environ["PYTHON_ENV"] = "test"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-reelpass"
os.environ["GATEWAY_SECRET_KEY"] = "sk_test_reelpass_webhooks"
os.environ.pop("REDIS_URL", None)

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.modules.auth.security import create_access_token
from app.modules.payments.adapters.gateway_client import (
    GatewayClient,
    GatewayInitResult,
    GatewayRefundResult,
    GatewayVerifyResult,
)
from app.modules.payments.enums import WalletTxType
from app.modules.payments.facades.payments import PaymentProcessor, PaymentRefunder
from app.modules.payments.middleware import reset_rate_limiters
from app.modules.payments.services import WalletService
from app.modules.payments.services.webhooks.event_dedup import reset_processed_event_cache
from app.modules.payments.services.webhooks.signature_verification import compute_signature
from app.shared.config import reset_settings
from app.shared.database.database import build_engine, get_async_session, init_models

GATEWAY_SECRET = os.environ["GATEWAY_SECRET_KEY"]


# -----------------------------------------------------------------------------
# 1) Estado global entre tests
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_singletons():
    """Settings, rate limiters y caché de webhooks limpios en cada test."""
    reset_settings()
    reset_rate_limiters()
    reset_processed_event_cache()
    yield
    reset_settings()
    reset_rate_limiters()
    reset_processed_event_cache()


# -----------------------------------------------------------------------------
# 2) Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def db_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'reelpass_test.db'}")
    await init_models(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fund_wallet(session_factory):
    """
    Factory: crea la wallet del usuario y la fondea vía ledger
    (el saldo y la suma del ledger quedan consistentes).
    """

    async def _fund(user_id: str, amount: int = 0):
        service = WalletService()
        async with session_factory() as session:
            wallet = await service.get_or_create_wallet(session, user_id)
            if amount:
                await service.ledger.apply_transaction(
                    session,
                    wallet.id,
                    amount,
                    WalletTxType.CREDIT,
                    "Test funding",
                )
            await session.commit()
            return await service.wallet_repo.get(session, wallet.id)

    return _fund


# -----------------------------------------------------------------------------
# 3) App y cliente HTTP
# -----------------------------------------------------------------------------
@pytest.fixture
def app(session_factory):
    from app.main import app as fastapi_app

    async def _session_override():
        async with session_factory() as session:
            try:
                yield session
            finally:
                if session.in_transaction():
                    await session.rollback()

    fastapi_app.dependency_overrides[get_async_session] = _session_override
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app):
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


@pytest.fixture
def auth_headers():
    """Factory de headers con JWT válido para el usuario dado."""

    def _make(user_id: str = "user-1", *, email: str = "viewer@example.com", roles=()):
        token = create_access_token(user_id, email=email, roles=list(roles))
        return {"Authorization": f"Bearer {token}"}

    return _make


# -----------------------------------------------------------------------------
# 4) Pasarela falsa
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_gateway():
    gateway = AsyncMock(spec=GatewayClient)

    async def _initialize(*, email, amount, currency, reference, metadata=None):
        return GatewayInitResult(
            reference=reference,
            checkout_url=f"https://checkout.gateway.test/{reference}",
            access_code="ac_test",
        )

    gateway.initialize_transaction.side_effect = _initialize
    gateway.verify_transaction.return_value = GatewayVerifyResult(reference="ref", status="success")
    gateway.refund_transaction.return_value = GatewayRefundResult(
        reference="ref", refund_id="rf_test_1", status="pending", amount=None
    )
    return gateway


@pytest.fixture
def use_fake_gateway(app, fake_gateway):
    """Las rutas de pago (y de reembolso) usan la pasarela falsa."""
    from app.modules.payments.routes.payments import get_payment_processor, get_payment_refunder

    app.dependency_overrides[get_payment_processor] = lambda: PaymentProcessor(gateway=fake_gateway)
    app.dependency_overrides[get_payment_refunder] = lambda: PaymentRefunder(gateway=fake_gateway)
    return fake_gateway


# -----------------------------------------------------------------------------
# 5) Webhooks firmados
# -----------------------------------------------------------------------------
def build_webhook_body(
    event: str,
    reference: Optional[str],
    *,
    amount: Optional[int] = None,
    event_id: Optional[str] = "evt_1",
    **data: Any,
) -> bytes:
    payload: Dict[str, Any] = {"event": event, "data": {"reference": reference, **data}}
    if amount is not None:
        payload["data"]["amount"] = amount
    if event_id is not None:
        payload["data"]["id"] = event_id
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def sign(raw_body: bytes, secret: str = GATEWAY_SECRET) -> str:
    return compute_signature(raw_body, secret)


@pytest.fixture
def webhook_body():
    return build_webhook_body


@pytest.fixture
def webhook_signature():
    return sign
