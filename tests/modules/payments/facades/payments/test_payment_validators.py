# tests/modules/payments/facades/payments/test_payment_validators.py
# -*- coding: utf-8 -*-
"""
Suite: validación de solicitudes de pago
Objetivo:
  - Montos en kobo: enteros, mínimo 100, máximo 10,000,000
  - Propósito, email, método de pago e idempotency key
  - Moneda: ISO 4217 de 3 letras; la wallet solo acepta su moneda
  - Metadata por propósito (content_id/content_type en rentas y compras)
  - parse_payment_request agrega todos los errores en un ValidationError
"""

import pytest

from app.modules.entitlements.enums import ContentType
from app.modules.payments.enums import PaymentMethod, PaymentPurpose
from app.modules.payments.errors import ValidationError
from app.modules.payments.facades.payments import (
    parse_payment_request,
    sanitize_input,
    validate_amount,
    validate_currency,
    validate_email,
    validate_idempotency_key,
    validate_payment_request,
    validate_purpose,
)
from app.modules.payments.schemas.metadata_schemas import RentalMetadata


def _rental_request(**overrides):
    data = {
        "amount": 3000,
        "purpose": "rental",
        "email": "viewer@example.com",
        "paymentMethod": "wallet",
        "metadata": {"content_id": "movie-42", "content_type": "movie"},
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize("amount", [100, 3000, 10_000_000, 5000.0])
def test_validate_amount_accepts_whole_kobo_in_range(amount):
    assert validate_amount(amount).is_valid


@pytest.mark.parametrize(
    "amount, message",
    [
        (None, "Amount is required and must be a number"),
        ("3000", "Amount is required and must be a number"),
        (True, "Amount is required and must be a number"),
        (99, "Amount must be at least 100 kobo"),
        (10_000_001, "Amount exceeds maximum limit of 10000000 kobo"),
        (150.5, "Amount must be a whole number of minor currency units"),
    ],
)
def test_validate_amount_rejects(amount, message):
    result = validate_amount(amount)
    assert not result.is_valid
    assert result.errors == [message]


def test_validate_purpose():
    assert validate_purpose("wallet_topup").is_valid
    assert validate_purpose(None).errors == ["Payment purpose is required"]
    assert validate_purpose("tip").errors[0].startswith("Invalid payment purpose. Must be one of:")


@pytest.mark.parametrize("email", ["", None, "no-at-sign", "a@b", "spaces in@mail.com"])
def test_validate_email_rejects(email):
    assert not validate_email(email).is_valid


def test_validate_idempotency_key_length_bounds():
    assert validate_idempotency_key(None).is_valid
    assert validate_idempotency_key("k" * 10).is_valid
    assert validate_idempotency_key("k" * 255).is_valid
    assert not validate_idempotency_key("short").is_valid
    assert not validate_idempotency_key("k" * 256).is_valid


def test_sanitize_input_trims_nested_strings():
    raw = {"email": "  viewer@example.com ", "metadata": {"content_id": " m1 ", "tags": [" a "]}}
    assert sanitize_input(raw) == {
        "email": "viewer@example.com",
        "metadata": {"content_id": "m1", "tags": ["a"]},
    }


def test_rental_requires_content_metadata():
    result = validate_payment_request(_rental_request(metadata={}))
    assert not result.is_valid
    assert any("content_id" in e for e in result.errors)
    assert any("content_type" in e for e in result.errors)


def test_rental_rejects_unknown_content_type():
    result = validate_payment_request(
        _rental_request(metadata={"content_id": "x1", "content_type": "podcast"})
    )
    assert not result.is_valid


def test_wallet_topup_cannot_be_paid_from_wallet():
    result = validate_payment_request(
        {"amount": 5000, "purpose": "wallet_topup", "email": "a@b.co", "paymentMethod": "wallet"}
    )
    assert "Wallet top-up cannot be paid from the wallet" in result.errors


def test_parse_payment_request_builds_typed_request():
    request = parse_payment_request(
        _rental_request(email="  viewer@example.com  "),
        idempotency_key="  rent-movie-42-0001 ",
    )
    assert request.amount == 3000
    assert request.purpose == PaymentPurpose.RENTAL
    assert request.payment_method == PaymentMethod.WALLET
    assert request.email == "viewer@example.com"
    assert request.currency == "NGN"
    assert request.idempotency_key == "rent-movie-42-0001"
    assert isinstance(request.metadata, RentalMetadata)
    assert request.metadata.content_type == ContentType.MOVIE


def test_parse_payment_request_defaults_to_card_and_coerces_numeric_content_id():
    request = parse_payment_request(
        {
            "amount": 1500,
            "purpose": "purchase",
            "email": "viewer@example.com",
            "metadata": {"content_id": 77, "content_type": "episode"},
        }
    )
    assert request.payment_method == PaymentMethod.CARD
    assert request.metadata.content_id == "77"


def test_parse_payment_request_collects_every_error():
    with pytest.raises(ValidationError) as exc:
        parse_payment_request({"amount": 50, "purpose": "rental", "email": "bad"})

    errors = exc.value.errors
    assert "Amount must be at least 100 kobo" in errors
    assert "Invalid email format" in errors
    assert any("content_id" in e for e in errors)
    assert exc.value.status_code == 400


def test_parse_payment_request_blank_idempotency_key_is_ignored():
    request = parse_payment_request(_rental_request(), idempotency_key="   ")
    assert request.idempotency_key is None


@pytest.mark.parametrize("currency", ["dollars", "N", "NG1", 566])
def test_validate_currency_rejects_non_iso_codes(currency):
    result = validate_currency(currency)
    assert result.errors == ["Currency must be a 3-letter ISO 4217 code"]


def test_validate_currency_wallet_must_match_wallet_currency():
    assert validate_currency("ngn", method="wallet").is_valid
    assert validate_currency("USD", method="card").is_valid
    assert validate_currency(None, method="wallet").is_valid
    assert validate_currency("USD", method="wallet").errors == ["Wallet payments must be made in NGN"]
    assert validate_currency("GHS", method="wallet", wallet_currency="GHS").is_valid


def test_parse_payment_request_rejects_bad_currency_and_uppercases_valid_one():
    with pytest.raises(ValidationError) as exc:
        parse_payment_request(_rental_request(currency="dollars"))
    assert "Currency must be a 3-letter ISO 4217 code" in exc.value.errors

    request = parse_payment_request(_rental_request(paymentMethod="card", currency=" usd "))
    assert request.currency == "USD"

    request = parse_payment_request(_rental_request())
    assert request.currency == "NGN"


# Fin del archivo tests/modules/payments/facades/payments/test_payment_validators.py
