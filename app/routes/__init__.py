# -*- coding: utf-8 -*-
"""
app/routes/__init__.py

Ensamblador principal de ruteadores de la API de ReelPass.

Responsabilidades:
- Incluir el router de health (/health).
- Incluir los routers de los módulos payments y entitlements.

Autor: ReelPass
Fecha: 19/09/2026
"""

from fastapi import APIRouter

from app.modules.entitlements.routes import router as entitlements_router
from app.modules.payments.routes import router as payments_router

from .health_routes import router as health_router

router = APIRouter()

router.include_router(health_router)
router.include_router(payments_router)
router.include_router(entitlements_router)

__all__ = ["router"]

# Fin del archivo app/routes/__init__.py
