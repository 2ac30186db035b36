# -*- coding: utf-8 -*-
"""
app/modules/entitlements/schemas/__init__.py

Autor: ReelPass
Fecha: 19/09/2026
"""

from .entitlement_schemas import (
    AccessCheckIn,
    AccessCheckOut,
    EntitlementsOut,
    PurchaseOut,
    RentalOut,
)

__all__ = [
    "AccessCheckIn",
    "AccessCheckOut",
    "EntitlementsOut",
    "PurchaseOut",
    "RentalOut",
]
