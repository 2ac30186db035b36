# tests/shared/config/test_logging_config.py
# -*- coding: utf-8 -*-
import logging

import pytest

json_logger = pytest.importorskip(
    "pythonjsonlogger", reason="Se omite test JSON si no está instalado python-json-logger"
)


def test_setup_logging_plain():
    from app.shared.config.logging_config import setup_logging

    setup_logging(level="DEBUG", fmt="plain")
    logger = logging.getLogger("test_plain")
    logger.debug("hello plain")

    assert any(isinstance(h, logging.StreamHandler) for h in logging.getLogger().handlers)


def test_setup_logging_json():
    from app.shared.config.logging_config import setup_logging

    setup_logging(level="INFO", fmt="json")
    logging.getLogger("test_json").info("hello json")

    found = any(
        getattr(h, "formatter", None) is not None
        and h.formatter.__class__.__module__.startswith("pythonjsonlogger")
        for h in logging.getLogger().handlers
    )
    assert found, "Se esperaba JsonFormatter activo en modo json"


# Fin del archivo tests/shared/config/test_logging_config.py
