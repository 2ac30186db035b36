# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/gateway_client.py

Cliente HTTP de la pasarela de pagos (API compatible con Paystack).

Operaciones:
- initialize_transaction: crea la transacción y devuelve la URL de checkout
- verify_transaction: consulta el estado de una referencia
- refund_transaction: reembolsa (total o parcial) una transacción cobrada

Errores:
- Timeout o error de transporte → UpstreamError(timed_out=True).
  No hubo respuesta: el pago puede quedarse en `initiated`.
- Respuesta no 2xx o `status: false` → UpstreamError(timed_out=False)
  con el cuerpo crudo para logs. La pasarela rechazó la operación.

Timeouts explícitos (connect 5s, read 10s por default). El cliente
httpx es un singleton con keep-alive; se cierra en el shutdown de la app.

Autor: ReelPass
Fecha: 13/09/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from app.modules.payments.errors import UpstreamError
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings

logger = logging.getLogger(__name__)

GATEWAY_HTTP_LIMITS = httpx.Limits(
    max_keepalive_connections=20,
    max_connections=50,
    keepalive_expiry=30.0,
)


@dataclass(frozen=True)
class GatewayInitResult:
    reference: str
    checkout_url: str
    access_code: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GatewayVerifyResult:
    reference: str
    status: str  # success | failed | abandoned | pending...
    amount: Optional[int] = None
    gateway_response: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class GatewayRefundResult:
    reference: str
    refund_id: Optional[str]
    status: str  # pending | processed...
    amount: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def build_timeout(settings: PaymentsSettings) -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.gateway_connect_timeout_seconds,
        read=settings.gateway_read_timeout_seconds,
        write=settings.gateway_read_timeout_seconds,
        pool=5.0,
    )


class GatewayClient:
    """Adaptador fino sobre la API REST de la pasarela."""

    def __init__(
        self,
        settings: Optional[PaymentsSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.gateway_base_url,
                timeout=build_timeout(self.settings),
                limits=GATEWAY_HTTP_LIMITS,
                transport=self._transport,
            )
            logger.debug("Gateway HTTP client created base_url=%s", self.settings.gateway_base_url)
        return self._client

    def _headers(self) -> Dict[str, str]:
        if not self.settings.has_gateway_secret:
            raise UpstreamError("Gateway secret key not configured")
        return {
            "Authorization": f"Bearer {self.settings.gateway_secret_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        headers = self._headers()
        try:
            response = await self._get_client().request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("Gateway %s %s timed out: %s", method, path, e)
            raise UpstreamError("Gateway request timed out", timed_out=True) from e
        except httpx.TransportError as e:
            logger.warning("Gateway %s %s transport error: %s", method, path, e)
            raise UpstreamError("Gateway unreachable", timed_out=True) from e

        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            body = {"raw": response.text}

        if response.status_code >= 400 or not body.get("status"):
            logger.error(
                "Gateway %s %s rejected: http=%s body=%s",
                method,
                path,
                response.status_code,
                body,
            )
            raise UpstreamError(
                str(body.get("message") or f"Gateway returned HTTP {response.status_code}"),
                raw_response=body,
            )
        return body

    async def initialize_transaction(
        self,
        *,
        email: str,
        amount: int,
        currency: str,
        reference: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GatewayInitResult:
        payload: Dict[str, Any] = {
            "email": email,
            "amount": amount,
            "currency": currency,
            "reference": reference,
            "metadata": metadata or {},
        }
        if self.settings.gateway_callback_url:
            payload["callback_url"] = self.settings.gateway_callback_url

        body = await self._request("POST", "/transaction/initialize", json=payload)
        data = body.get("data") or {}
        checkout_url = data.get("authorization_url")
        if not checkout_url:
            raise UpstreamError("Gateway response missing authorization_url", raw_response=body)

        return GatewayInitResult(
            reference=str(data.get("reference") or reference),
            checkout_url=checkout_url,
            access_code=data.get("access_code"),
            raw=body,
        )

    async def verify_transaction(self, reference: str) -> GatewayVerifyResult:
        body = await self._request("GET", f"/transaction/verify/{reference}")
        data = body.get("data") or {}
        amount = data.get("amount")
        return GatewayVerifyResult(
            reference=str(data.get("reference") or reference),
            status=str(data.get("status") or "unknown"),
            amount=int(amount) if isinstance(amount, (int, float)) else None,
            gateway_response=data.get("gateway_response"),
            raw=body,
        )

    async def refund_transaction(
        self,
        *,
        reference: str,
        amount: int,
        currency: str,
        note: Optional[str] = None,
    ) -> GatewayRefundResult:
        payload: Dict[str, Any] = {
            "transaction": reference,
            "amount": amount,
            "currency": currency,
        }
        if note:
            payload["merchant_note"] = note

        body = await self._request("POST", "/refund", json=payload)
        data = body.get("data") or {}
        refund_id = data.get("id")
        refunded = data.get("amount")
        return GatewayRefundResult(
            reference=reference,
            refund_id=str(refund_id) if refund_id is not None else None,
            status=str(data.get("status") or "pending"),
            amount=int(refunded) if isinstance(refunded, (int, float)) else None,
            raw=body,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton global
_gateway_client: Optional[GatewayClient] = None


def get_gateway_client() -> GatewayClient:
    """Dependencia FastAPI / acceso global al cliente de la pasarela."""
    global _gateway_client
    if _gateway_client is None:
        _gateway_client = GatewayClient()
    return _gateway_client


async def close_gateway_client() -> None:
    """Cierra el cliente HTTP (registrar en el lifespan)."""
    global _gateway_client
    if _gateway_client is not None:
        await _gateway_client.aclose()
        _gateway_client = None


__all__ = [
    "GatewayClient",
    "GatewayInitResult",
    "GatewayRefundResult",
    "GatewayVerifyResult",
    "get_gateway_client",
    "close_gateway_client",
]

# Fin del archivo app/modules/payments/adapters/gateway_client.py
