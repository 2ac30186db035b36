# -*- coding: utf-8 -*-
"""
app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import settings, get_settings

`settings` es un proxy perezoso: no instancia BaseAppSettings al importar,
lo que permite a los tests ajustar variables de entorno antes del primer uso.

Autor: ReelPass
Fecha: 02/09/2026
"""

from __future__ import annotations

from typing import Any, Optional

from .settings_base import BaseAppSettings
from .settings_payments import PaymentsSettings, get_payments_settings, reset_payments_settings
from .logging_config import setup_logging

_settings: Optional[BaseAppSettings] = None


def get_settings() -> BaseAppSettings:
    """Instancia única de BaseAppSettings."""
    global _settings
    if _settings is None:
        _settings = BaseAppSettings()
    return _settings


def reset_settings() -> None:
    """Descarta los singletons de configuración (tests)."""
    global _settings
    _settings = None
    reset_payments_settings()


class _SettingsProxy:
    """Delegación perezosa de atributos hacia get_settings()."""

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)


settings = _SettingsProxy()

__all__ = [
    "BaseAppSettings",
    "PaymentsSettings",
    "get_settings",
    "get_payments_settings",
    "reset_settings",
    "settings",
    "setup_logging",
]

# Fin del archivo app/shared/config/__init__.py
