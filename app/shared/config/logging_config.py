# -*- coding: utf-8 -*-
"""
app/shared/config/logging_config.py

Configuración centralizada de logging.
Formato plain en desarrollo y json (python-json-logger) en producción.

Autor: ReelPass
Fecha: 02/09/2026
"""

import logging.config
from typing import Literal

from pythonjsonlogger.json import JsonFormatter  # noqa: F401  (referenciado por dictConfig)

# Loggers de terceros demasiado verbosos en DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore", "apscheduler", "aiosqlite")


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "json"] = "plain",
) -> None:
    """
    Configura el logging raíz de la aplicación.

    Args:
        level: Nivel del logger raíz
        fmt: "plain" para consola legible, "json" para agregadores de logs

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    use_json = fmt == "json"

    formatters = {
        "default": {
            "format": "%(asctime)s %(levelname)s [%(name)s]: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "rename_fields": {"levelname": "level", "asctime": "ts"},
        },
    }

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else "default",
            "stream": "ext://sys.stdout",
        }
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
        "loggers": {name: {"level": "WARNING"} for name in _NOISY_LOGGERS},
    }

    logging.config.dictConfig(logging_config)


__all__ = ["setup_logging"]
# Fin del archivo app/shared/config/logging_config.py
