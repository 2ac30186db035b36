# -*- coding: utf-8 -*-
"""
app/modules/entitlements/enums/access_type_enum.py

Tipo de entitlement reportado por el resolver.

Autor: ReelPass
Fecha: 05/09/2026
"""

from enum import StrEnum


class AccessType(StrEnum):
    PURCHASE = "purchase"
    RENTAL = "rental"


__all__ = ["AccessType"]
