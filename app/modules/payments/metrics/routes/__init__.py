# -*- coding: utf-8 -*-
"""
app/modules/payments/metrics/routes/__init__.py
"""

from .routes_prometheus import router_prometheus

__all__ = ["router_prometheus"]
