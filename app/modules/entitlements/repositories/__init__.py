# -*- coding: utf-8 -*-
"""
app/modules/entitlements/repositories/__init__.py

Repositorios del módulo Entitlements.
"""

from .purchase_repository import PurchaseRepository
from .rental_repository import RentalRepository

__all__ = ["PurchaseRepository", "RentalRepository"]
