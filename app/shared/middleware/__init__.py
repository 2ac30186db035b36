# -*- coding: utf-8 -*-
"""
app/shared/middleware/__init__.py

Middlewares compartidos.
"""

from .exception_handler import JSONExceptionMiddleware, get_request_id
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "JSONExceptionMiddleware",
    "RequestLoggingMiddleware",
    "get_request_id",
]
