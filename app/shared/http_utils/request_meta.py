# -*- coding: utf-8 -*-
"""
app/shared/http_utils/request_meta.py

Helpers para extraer la IP del cliente detrás de proxies (nginx, balanceadores).

Lo usan el rate limiter (clave por IP) y el registro de webhooks
(IP de origen para monitoreo de abuso).

Autor: ReelPass
Fecha: 04/09/2026
"""
from __future__ import annotations

import os
from starlette.requests import Request


def _trust_proxy_headers() -> bool:
    """
    Indica si se confía en X-Forwarded-For / X-Real-IP.

    Default: false. Detrás de un balanceador propio, TRUST_PROXY_HEADERS=true.
    """
    return os.getenv("TRUST_PROXY_HEADERS", "false").lower() in ("true", "1", "yes")


def get_client_ip(request: Request) -> str:
    """
    IP del cliente.

    Con TRUST_PROXY_HEADERS=true:
        1. X-Forwarded-For (primer IP, cliente original)
        2. X-Real-IP
        3. request.client.host
    En otro caso solo request.client.host.

    Returns:
        IP como string, o "unknown" si no se puede determinar
    """
    if _trust_proxy_headers():
        xff = request.headers.get("x-forwarded-for")
        if xff:
            return xff.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


__all__ = [
    "get_client_ip",
]
