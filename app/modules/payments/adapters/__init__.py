# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/__init__.py

Adaptadores para integraciones con proveedores externos.
"""

from .gateway_client import (
    GatewayClient,
    GatewayInitResult,
    GatewayRefundResult,
    GatewayVerifyResult,
    close_gateway_client,
    get_gateway_client,
)

__all__ = [
    "GatewayClient",
    "GatewayInitResult",
    "GatewayRefundResult",
    "GatewayVerifyResult",
    "close_gateway_client",
    "get_gateway_client",
]
