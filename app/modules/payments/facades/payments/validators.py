# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/validators.py

Capa de validación de solicitudes de pago.

Funciones puras, sin efectos secundarios. Cada validador devuelve un
ValidationResult(is_valid, errors); validate_payment_request los agrega
y parse_payment_request construye el PaymentRequest tipado o levanta
ValidationError con todos los mensajes.

Autor: ReelPass
Fecha: 09/09/2026
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from app.modules.payments.enums import PaymentMethod, PaymentPurpose
from app.modules.payments.errors import ValidationError
from app.modules.payments.schemas.metadata_schemas import parse_metadata
from app.modules.payments.schemas.payment_schemas import PaymentRequest

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CURRENCY_REGEX = re.compile(r"^[A-Za-z]{3}$")

IDEMPOTENCY_KEY_MIN_LENGTH = 10
IDEMPOTENCY_KEY_MAX_LENGTH = 255

DEFAULT_MIN_AMOUNT = 100
DEFAULT_MAX_AMOUNT = 10_000_000


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=list(errors))

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult.from_errors(self.errors + other.errors)


# ---------------------------------------------------------------------------
# Sanitización
# ---------------------------------------------------------------------------
def sanitize_input(value: Any) -> Any:
    """
    Recorta strings recursivamente a través de dicts y listas.

    Examples:
        >>> sanitize_input({"email": "  a@b.co ", "metadata": {"content_id": " m1"}})
        {'email': 'a@b.co', 'metadata': {'content_id': 'm1'}}
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        return {key: sanitize_input(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_input(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Validadores individuales
# ---------------------------------------------------------------------------
def _as_minor_units(amount: Any) -> Optional[int]:
    """Entero de kobo o None si el valor no es un número entero."""
    if isinstance(amount, bool):
        return None
    if isinstance(amount, int):
        return amount
    if isinstance(amount, float) and amount.is_integer():
        return int(amount)
    return None


def validate_amount(
    amount: Any,
    *,
    min_amount: int = DEFAULT_MIN_AMOUNT,
    max_amount: int = DEFAULT_MAX_AMOUNT,
) -> ValidationResult:
    errors: List[str] = []
    value = _as_minor_units(amount)

    if amount is None or isinstance(amount, (bool, str)) or not isinstance(amount, (int, float)):
        errors.append("Amount is required and must be a number")
    elif value is None:
        errors.append("Amount must be a whole number of minor currency units")
    elif value < min_amount:
        errors.append(f"Amount must be at least {min_amount} kobo")
    elif value > max_amount:
        errors.append(f"Amount exceeds maximum limit of {max_amount} kobo")

    return ValidationResult.from_errors(errors)


def validate_purpose(purpose: Any) -> ValidationResult:
    errors: List[str] = []
    valid = [p.value for p in PaymentPurpose]

    if not purpose:
        errors.append("Payment purpose is required")
    elif not isinstance(purpose, str) or purpose not in valid:
        errors.append(f"Invalid payment purpose. Must be one of: {', '.join(valid)}")

    return ValidationResult.from_errors(errors)


def validate_email(email: Any) -> ValidationResult:
    errors: List[str] = []

    if not email:
        errors.append("Email is required")
    elif not isinstance(email, str) or not EMAIL_REGEX.match(email):
        errors.append("Invalid email format")

    return ValidationResult.from_errors(errors)


def validate_idempotency_key(key: Optional[str]) -> ValidationResult:
    """La llave es opcional; si viene, debe medir entre 10 y 255 caracteres."""
    errors: List[str] = []

    if key is None:
        return ValidationResult.from_errors(errors)
    if len(key) < IDEMPOTENCY_KEY_MIN_LENGTH:
        errors.append(f"Idempotency key must be at least {IDEMPOTENCY_KEY_MIN_LENGTH} characters")
    elif len(key) > IDEMPOTENCY_KEY_MAX_LENGTH:
        errors.append(f"Idempotency key must be at most {IDEMPOTENCY_KEY_MAX_LENGTH} characters")

    return ValidationResult.from_errors(errors)


def validate_payment_method(method: Any) -> ValidationResult:
    if method is None:
        return ValidationResult.from_errors([])
    valid = [m.value for m in PaymentMethod]
    if not isinstance(method, str) or method not in valid:
        return ValidationResult.from_errors(
            [f"Invalid payment method. Must be one of: {', '.join(valid)}"]
        )
    return ValidationResult.from_errors([])


def validate_currency(
    currency: Any,
    *,
    method: Any = None,
    wallet_currency: str = "NGN",
) -> ValidationResult:
    """
    Código ISO 4217 de 3 letras (opcional; default la moneda configurada).
    Un pago con wallet solo puede ir en la moneda de la wallet.
    """
    errors: List[str] = []

    if currency is None or currency == "":
        return ValidationResult.from_errors(errors)
    if not isinstance(currency, str) or not CURRENCY_REGEX.match(currency):
        errors.append("Currency must be a 3-letter ISO 4217 code")
    elif method == PaymentMethod.WALLET.value and currency.upper() != wallet_currency.upper():
        errors.append(f"Wallet payments must be made in {wallet_currency.upper()}")

    return ValidationResult.from_errors(errors)


def _metadata_errors(purpose: PaymentPurpose, metadata: Any) -> List[str]:
    if metadata is not None and not isinstance(metadata, Mapping):
        return ["Metadata must be an object"]
    try:
        parse_metadata(purpose, dict(metadata or {}))
    except PydanticValidationError as e:
        return [
            f"Invalid {purpose.value} metadata: {'.'.join(str(p) for p in err['loc']) or 'metadata'} {err['msg'].lower()}"
            for err in e.errors()
        ]
    return []


# ---------------------------------------------------------------------------
# Agregado
# ---------------------------------------------------------------------------
def validate_payment_request(
    data: Mapping[str, Any],
    *,
    idempotency_key: Optional[str] = None,
    min_amount: int = DEFAULT_MIN_AMOUNT,
    max_amount: int = DEFAULT_MAX_AMOUNT,
    default_currency: str = "NGN",
) -> ValidationResult:
    """
    Valida una solicitud ya sanitizada.

    Campos: amount, purpose, email, paymentMethod (o payment_method),
    currency, metadata e idempotency key.
    """
    method = data.get("paymentMethod", data.get("payment_method"))

    result = (
        validate_amount(data.get("amount"), min_amount=min_amount, max_amount=max_amount)
        .merge(validate_purpose(data.get("purpose")))
        .merge(validate_email(data.get("email")))
        .merge(validate_payment_method(method))
        .merge(validate_currency(data.get("currency"), method=method, wallet_currency=default_currency))
        .merge(validate_idempotency_key(idempotency_key))
    )

    # Reglas que dependen de un propósito válido
    if not validate_purpose(data.get("purpose")).is_valid:
        return result

    purpose = PaymentPurpose(data["purpose"])
    extra: List[str] = []
    if purpose == PaymentPurpose.WALLET_TOPUP and method == PaymentMethod.WALLET.value:
        extra.append("Wallet top-up cannot be paid from the wallet")
    extra.extend(_metadata_errors(purpose, data.get("metadata")))

    return result.merge(ValidationResult.from_errors(extra))


def parse_payment_request(
    raw: Mapping[str, Any],
    *,
    idempotency_key: Optional[str] = None,
    min_amount: int = DEFAULT_MIN_AMOUNT,
    max_amount: int = DEFAULT_MAX_AMOUNT,
    default_currency: str = "NGN",
) -> PaymentRequest:
    """
    Sanitiza, valida y construye el PaymentRequest.

    Raises:
        ValidationError: con todos los errores encontrados.
    """
    data: Dict[str, Any] = sanitize_input(dict(raw))
    key = sanitize_input(idempotency_key) if idempotency_key is not None else None
    if key == "":
        key = None

    result = validate_payment_request(
        data,
        idempotency_key=key,
        min_amount=min_amount,
        max_amount=max_amount,
        default_currency=default_currency,
    )
    if not result.is_valid:
        raise ValidationError(
            f"Validation failed: {', '.join(result.errors)}",
            errors=result.errors,
        )

    purpose = PaymentPurpose(data["purpose"])
    method = data.get("paymentMethod", data.get("payment_method")) or PaymentMethod.CARD.value
    currency = data.get("currency") or default_currency

    return PaymentRequest(
        amount=_as_minor_units(data["amount"]),
        purpose=purpose,
        payment_method=PaymentMethod(method),
        email=data["email"],
        currency=str(currency).upper(),
        metadata=parse_metadata(purpose, dict(data.get("metadata") or {})),
        idempotency_key=key,
    )


__all__ = [
    "ValidationResult",
    "sanitize_input",
    "validate_amount",
    "validate_purpose",
    "validate_email",
    "validate_idempotency_key",
    "validate_payment_method",
    "validate_currency",
    "validate_payment_request",
    "parse_payment_request",
]

# Fin del archivo app/modules/payments/facades/payments/validators.py
