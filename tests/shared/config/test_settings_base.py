# tests/shared/config/test_settings_base.py
# -*- coding: utf-8 -*-
"""
Suite: BaseAppSettings
Objetivo:
  - Normalización de DB_URL hacia asyncpg
  - CORS_ORIGINS separado por comas
  - LOG_LEVEL insensible a mayúsculas
"""

import pytest

from app.shared.config import get_settings, reset_settings
from app.shared.config.settings_base import BaseAppSettings


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("postgres://u:p@db:5432/reelpass", "postgresql+asyncpg://u:p@db:5432/reelpass"),
        ("postgresql://u:p@db:5432/reelpass", "postgresql+asyncpg://u:p@db:5432/reelpass"),
        ("sqlite+aiosqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
    ],
)
def test_database_url_normalisation(monkeypatch, raw, expected):
    monkeypatch.setenv("DB_URL", raw)

    assert BaseAppSettings(_env_file=None).database_url == expected


def test_cors_origins_are_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", ' https://a.example.com , "https://b.example.com",, ')

    origins = BaseAppSettings(_env_file=None).get_cors_origins()

    assert origins == ["https://a.example.com", "https://b.example.com"]


def test_log_level_is_upper_cased(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert BaseAppSettings(_env_file=None).log_level == "DEBUG"


def test_environment_flags(monkeypatch):
    monkeypatch.setenv("PYTHON_ENV", "production")

    settings = BaseAppSettings(_env_file=None)

    assert settings.is_production is True


def test_get_settings_reads_env_after_reset(monkeypatch):
    monkeypatch.setenv("JWT_ADMIN_ROLE", "ops")
    reset_settings()

    assert get_settings().jwt_admin_role == "ops"


# Fin del archivo tests/shared/config/test_settings_base.py
