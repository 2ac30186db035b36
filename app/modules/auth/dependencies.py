# -*- coding: utf-8 -*-
"""
app/modules/auth/dependencies.py

Dependencias de autenticación JWT para FastAPI.

Provee:
- validate_jwt_token: Core logic para validar token (única fuente de verdad)
- get_current_user: usuario autenticado
- get_current_admin: exige el rol admin en el claim `roles`

Autor: ReelPass
Fecha: 04/09/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from app.shared.config import get_settings
from .security import TokenDecodeError, bearer_scheme, decode_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identidad verificada que entrega el proveedor de auth."""

    user_id: str
    email: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)

    def has_role(self, role: str) -> bool:
        return role in self.roles


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "invalid_token", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def validate_jwt_token(token: str) -> AuthenticatedUser:
    """
    Valida un JWT y construye el AuthenticatedUser.

    Args:
        token: JWT token string (sin prefijo "Bearer ")

    Raises:
        HTTPException 401: Si el token es inválido o expirado.
    """
    try:
        payload = decode_access_token(token)
    except TokenDecodeError as e:
        raise _unauthorized(str(e)) from e

    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]

    return AuthenticatedUser(
        user_id=str(payload["sub"]),
        email=payload.get("email"),
        roles=tuple(str(r) for r in roles),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Dependencia de autenticación para endpoints protegidos.

    Extrae y valida el JWT del header Authorization: Bearer <token>.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    return validate_jwt_token(credentials.credentials)


async def get_current_admin(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """
    Dependencia que requiere rol admin en el token.

    Raises:
        HTTPException 401: Token inválido
        HTTPException 403: Usuario no es admin
    """
    if not user.has_role(get_settings().jwt_admin_role):
        logger.warning("Admin access denied for user %s", user.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "message": "Admin access required"},
        )
    return user


__all__ = [
    "AuthenticatedUser",
    "validate_jwt_token",
    "get_current_user",
    "get_current_admin",
]
