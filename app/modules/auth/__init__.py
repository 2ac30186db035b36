# -*- coding: utf-8 -*-
"""
app/modules/auth/__init__.py

Capacidad de autenticación: verifica el JWT del proveedor de identidad
y expone al usuario autenticado como dependencia FastAPI.
"""

from .dependencies import (
    AuthenticatedUser,
    get_current_admin,
    get_current_user,
    validate_jwt_token,
)

__all__ = [
    "AuthenticatedUser",
    "get_current_admin",
    "get_current_user",
    "validate_jwt_token",
]
# Fin del archivo app/modules/auth/__init__.py
