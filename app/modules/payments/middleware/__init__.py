# -*- coding: utf-8 -*-
"""
app/modules/payments/middleware/__init__.py

Dependencias de protección para endpoints de pagos.
"""

from .rate_limiter import (
    SlidingWindowRateLimiter,
    check_payment_rate_limit,
    check_webhook_rate_limit,
    get_payment_rate_limiter,
    get_webhook_rate_limiter,
    reset_rate_limiters,
)

__all__ = [
    "SlidingWindowRateLimiter",
    "check_payment_rate_limit",
    "check_webhook_rate_limit",
    "get_payment_rate_limiter",
    "get_webhook_rate_limiter",
    "reset_rate_limiters",
]
