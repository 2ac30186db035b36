# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_method_enum.py

Método de pago elegido por el cliente (campo paymentMethod).

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum

from .payment_provider_enum import PaymentProvider


class PaymentMethod(StrEnum):
    WALLET = "wallet"
    CARD = "card"

    @property
    def provider(self) -> PaymentProvider:
        match self:
            case PaymentMethod.WALLET:
                return PaymentProvider.WALLET
            case PaymentMethod.CARD:
                return PaymentProvider.GATEWAY


__all__ = ["PaymentMethod"]
