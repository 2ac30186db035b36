# -*- coding: utf-8 -*-
"""
app/modules/payments/errors.py

Taxonomía de errores del dominio de pagos.

Cada error lleva:
- error_code: identificador estable para clientes
- status_code: código HTTP con el que se expone
- context: datos para logs (payment_id, purpose, amount...), nunca al cliente

UpstreamError y FulfillmentError se exponen con un mensaje genérico;
el resto devuelve su mensaje tal cual.

Autor: ReelPass
Fecha: 05/09/2026
"""

from __future__ import annotations

from typing import Any, Dict, Optional

GENERIC_PROCESSING_MESSAGE = "Payment processing failed"


class PaymentsError(Exception):
    """Base de los errores del dominio de pagos."""

    error_code: str = "payments_error"
    status_code: int = 500
    expose_message: bool = True

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context: Dict[str, Any] = dict(context or {})

    @property
    def public_message(self) -> str:
        return self.message if self.expose_message else GENERIC_PROCESSING_MESSAGE

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.public_message}


class ValidationError(PaymentsError):
    """Entrada inválida; sin efectos secundarios."""

    error_code = "validation_error"
    status_code = 400

    def __init__(self, message: str, *, errors: Optional[list[str]] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.errors = list(errors or [message])


class ConflictError(PaymentsError):
    """Renta activa duplicada, compra repetida o idempotency key reutilizada."""

    error_code = "conflict"
    status_code = 409


class InsufficientFundsError(PaymentsError):
    """Saldo de wallet insuficiente."""

    error_code = "insufficient_funds"
    status_code = 400

    def __init__(self, *, required: int, available: int, **kwargs: Any) -> None:
        self.required = required
        self.available = available
        self.deficit = required - available
        super().__init__(
            f"Insufficient wallet balance: required={required}, "
            f"available={available}, deficit={self.deficit}",
            **kwargs,
        )


class AuthError(PaymentsError):
    """Token o firma ausente/inválida."""

    error_code = "unauthorized"
    status_code = 401


class NotFoundError(PaymentsError):
    error_code = "not_found"
    status_code = 404


class RateLimitError(PaymentsError):
    error_code = "rate_limit_exceeded"
    status_code = 429

    def __init__(self, message: str, *, retry_after: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class UpstreamError(PaymentsError):
    """La pasarela no respondió, expiró o rechazó la operación."""

    error_code = "upstream_error"
    status_code = 502
    expose_message = False

    def __init__(
        self,
        message: str,
        *,
        raw_response: Any = None,
        timed_out: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.raw_response = raw_response
        self.timed_out = timed_out


class FulfillmentError(PaymentsError):
    """Falló la escritura del entitlement después del cobro."""

    error_code = "fulfillment_error"
    status_code = 500
    expose_message = False


__all__ = [
    "GENERIC_PROCESSING_MESSAGE",
    "PaymentsError",
    "ValidationError",
    "ConflictError",
    "InsufficientFundsError",
    "AuthError",
    "NotFoundError",
    "RateLimitError",
    "UpstreamError",
    "FulfillmentError",
]
