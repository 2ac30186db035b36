# -*- coding: utf-8 -*-
"""
app/modules/entitlements/services/__init__.py
"""

from .entitlement_service import AccessResult, ActiveEntitlements, EntitlementResolver
from .fulfillment_service import FulfillmentOutcome, FulfillmentService, rental_duration_hours

__all__ = [
    "AccessResult",
    "ActiveEntitlements",
    "EntitlementResolver",
    "FulfillmentOutcome",
    "FulfillmentService",
    "rental_duration_hours",
]
