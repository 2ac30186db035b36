# -*- coding: utf-8 -*-
"""
app/modules/entitlements/models/__init__.py

Modelos ORM del módulo Entitlements.
"""

from .purchase_models import Purchase
from .rental_models import Rental

__all__ = ["Purchase", "Rental"]
