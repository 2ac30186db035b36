# -*- coding: utf-8 -*-
"""
app/main.py

Punto de entrada principal del backend de ReelPass.

- Carga .env antes de leer configuración
- Logging centralizado (plain / json)
- Ciclo de vida: tablas en desarrollo, scheduler con expiración de rentas,
  cierre ordenado de clientes HTTP y Redis
- Handlers de errores del dominio con cuerpo {"detail": {"error", "message"}}
- CORS desde CORS_ORIGINS

Autor: ReelPass
Fecha: 19/09/2026
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea configuración
# En producción se respetan las variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_override_env = os.getenv("PYTHON_ENV", "development").strip().lower() != "production"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

import anyio
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.modules.payments.errors import (
    FulfillmentError,
    PaymentsError,
    RateLimitError,
    UpstreamError,
)
from app.shared.config import get_settings, setup_logging
from app.shared.middleware import JSONExceptionMiddleware, RequestLoggingMiddleware

_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    settings = get_settings()

    if settings.python_env == "development":
        from app.shared.database.database import init_models

        await init_models()
        logger.info("Tablas verificadas (desarrollo)")

    scheduler = None
    if settings.scheduler_enabled:
        from app.modules.entitlements.jobs import register_expire_rentals_job
        from app.shared.scheduler import get_scheduler

        scheduler = get_scheduler()
        register_expire_rentals_job(interval_minutes=settings.expire_rentals_interval_minutes)
        scheduler.start()
        logger.info("Scheduler iniciado con jobs programados")

    logger.info("Backend de %s iniciado (env=%s)", settings.app_name, settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        with anyio.CancelScope(shield=True):
            if scheduler is not None:
                scheduler.shutdown(wait=True)

            from app.modules.payments.adapters.gateway_client import close_gateway_client
            from app.shared.redis import close_async_redis_client

            await close_gateway_client()
            await close_async_redis_client()

        logger.info("Backend de %s apagado", settings.app_name)


openapi_tags = [
    {"name": "payments", "description": "Pagos con wallet o pasarela"},
    {"name": "payments:webhooks", "description": "Webhooks firmados de la pasarela"},
    {"name": "payments:wallet", "description": "Wallet y ledger"},
    {"name": "entitlements", "description": "Rentas, compras y acceso a contenido"},
    {"name": "health", "description": "Estado del servicio"},
]

app = FastAPI(
    title=f"{_settings.app_name} API",
    description="Pagos, wallet y entitlements de la plataforma de renta de video",
    version=_settings.app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)

# El orden de ejecución de middlewares es inverso al registro:
# CORS se registra al final para ser el más externo.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(JSONExceptionMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-Request-ID"],
    max_age=600,
)


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION HANDLERS
# ═══════════════════════════════════════════════════════════════════════════════
@app.exception_handler(PaymentsError)
async def payments_exception_handler(request: Request, exc: PaymentsError):
    """Errores del dominio → {"detail": {"error", "message"}} con su status."""
    headers = None
    if isinstance(exc, RateLimitError):
        headers = {"Retry-After": str(exc.retry_after)}

    if isinstance(exc, (UpstreamError, FulfillmentError)):
        logger.error(
            "%s on %s %s: %s context=%s raw=%s",
            exc.error_code,
            request.method,
            request.url.path,
            exc.message,
            exc.context,
            getattr(exc, "raw_response", None),
        )
    else:
        logger.info(
            "%s on %s %s: %s",
            exc.error_code,
            request.method,
            request.url.path,
            exc.message,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_detail()},
        headers=headers,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        content={"detail": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


# Incluye router maestro
from app.routes import router as main_router  # noqa: E402

app.include_router(main_router)


@app.get("/")
async def root():
    return {"service": _settings.app_name, "status": "active"}


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=_settings.app_host,
        port=_settings.app_port,
        reload=not _settings.is_production,
    )

# Fin del archivo app/main.py
