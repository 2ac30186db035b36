# -*- coding: utf-8 -*-
"""
app/modules/auth/security.py

Módulo de seguridad para Auth en ReelPass:
- Esquema Bearer para extraer el token
- Creación / decodificación de JWT (python-jose)

El proveedor de identidad emite los tokens; este servicio solo los
verifica. create_access_token existe para tests y herramientas internas.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from app.shared.config import get_settings

ACCESS_TOKEN_EXPIRE_MINUTES = 60

# auto_error=False: la ausencia de token se reporta con el mismo formato
# {"detail": {"error", "message"}} que el resto de errores 401
bearer_scheme = HTTPBearer(auto_error=False)


class TokenDecodeError(Exception):
    """Error al decodificar/validar un token JWT."""


def _secret_and_algorithm() -> tuple[str, str]:
    settings = get_settings()
    return settings.jwt_secret_key.get_secret_value(), settings.jwt_algorithm


def create_access_token(
    subject: Union[str, int],
    expires_delta: Optional[timedelta] = None,
    **extra: Any,
) -> str:
    """
    Crea un JWT con claim 'sub' y claims opcionales en `extra`
    (email, roles...).
    """
    secret, algorithm = _secret_and_algorithm()
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida un JWT. Lanza TokenDecodeError si es inválido/expirado.
    """
    secret, algorithm = _secret_and_algorithm()
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        raise TokenDecodeError("Invalid or expired token") from e

    sub = payload.get("sub")
    if sub is None or not str(sub).strip():
        raise TokenDecodeError("Token does not contain user identifier")
    return payload


__all__ = [
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "bearer_scheme",
    "TokenDecodeError",
    "create_access_token",
    "decode_access_token",
]
# Fin del archivo app/modules/auth/security.py
