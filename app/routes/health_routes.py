# -*- coding: utf-8 -*-
"""
app/routes/health_routes.py

Endpoint básico de health check del backend de ReelPass.

Autor: ReelPass
Fecha: 19/09/2026
"""

from fastapi import APIRouter

from app.modules.payments.utils.datetime_helpers import to_iso8601, utcnow
from app.shared.config import get_settings
from app.shared.database.database import check_database_health

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Health check del backend",
    description="Estado básico del backend con verificación de conectividad a la base de datos.",
)
async def health_check() -> dict:
    settings = get_settings()
    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": to_iso8601(utcnow()),
        "environment": settings.python_env,
        "database": {
            "reachable": db_ok,
        },
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }

# Fin del archivo app/routes/health_routes.py
