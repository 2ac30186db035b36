# -*- coding: utf-8 -*-
"""
app/modules/entitlements/routes/__init__.py

Ensamblador de rutas del módulo Entitlements.

Autor: ReelPass
Fecha: 19/09/2026
"""

from fastapi import APIRouter

from .entitlements import router as entitlements_router

router = APIRouter()
router.include_router(entitlements_router)

__all__ = ["router"]
