# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/__init__.py

Ensamblador de rutas REST del módulo Payments.

Incluye:
- /payments/metrics/*
- /payments/webhooks/gateway
- /payments, /payments/{payment_id}, /payments/{payment_id}/wait,
  /payments/{payment_id}/refund (admin)
- /wallet, /wallet/transactions, /wallet/adjustments

Autor: ReelPass
Fecha: 19/09/2026
"""

from fastapi import APIRouter

from .metrics import router as metrics_router
from .payments import router as payments_router
from .wallet import router as wallet_router
from .webhooks_gateway import router as webhooks_gateway_router

router = APIRouter()

# Rutas estáticas antes que /payments/{payment_id}
router.include_router(metrics_router, prefix="/payments")
router.include_router(webhooks_gateway_router, prefix="/payments")
router.include_router(payments_router, prefix="/payments")
router.include_router(wallet_router)

__all__ = ["router"]

# Fin del archivo app/modules/payments/routes/__init__.py
