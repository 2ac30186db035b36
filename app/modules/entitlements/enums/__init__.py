# -*- coding: utf-8 -*-
"""
app/modules/entitlements/enums/__init__.py

Enums del módulo Entitlements.
"""

from .access_type_enum import AccessType
from .content_type_enum import ContentType
from .rental_status_enum import RentalStatus

__all__ = ["AccessType", "ContentType", "RentalStatus"]
