# -*- coding: utf-8 -*-
"""
tests/shared/http_utils/test_request_meta.py

Tests de get_client_ip con y sin TRUST_PROXY_HEADERS.

Autor: ReelPass
Fecha: 22/09/2026
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.shared.http_utils.request_meta import get_client_ip


class MockRequest:
    """Mock de Starlette Request para tests."""

    def __init__(self, client_host="127.0.0.1", headers=None):
        self.headers = headers or {}
        if client_host is None:
            self.client = None
        else:
            self.client = MagicMock()
            self.client.host = client_host


class TestGetClientIpWithoutTrustProxy:
    """TRUST_PROXY_HEADERS=false (default)."""

    @pytest.fixture(autouse=True)
    def _untrusted(self, monkeypatch):
        monkeypatch.setenv("TRUST_PROXY_HEADERS", "false")

    def test_uses_client_host_by_default(self):
        assert get_client_ip(MockRequest(client_host="192.168.1.100")) == "192.168.1.100"

    def test_ignores_xff_when_not_trusted(self):
        request = MockRequest(
            client_host="10.0.0.1",
            headers={"x-forwarded-for": "203.0.113.50, 70.41.3.18"},
        )
        assert get_client_ip(request) == "10.0.0.1"

    def test_unknown_without_client(self):
        assert get_client_ip(MockRequest(client_host=None)) == "unknown"


class TestGetClientIpWithTrustProxy:
    """TRUST_PROXY_HEADERS=true (detrás de balanceador propio)."""

    @pytest.fixture(autouse=True)
    def _trusted(self, monkeypatch):
        monkeypatch.setenv("TRUST_PROXY_HEADERS", "true")

    def test_first_forwarded_ip_wins(self):
        request = MockRequest(
            client_host="10.0.0.1",
            headers={"x-forwarded-for": "203.0.113.50, 70.41.3.18"},
        )
        assert get_client_ip(request) == "203.0.113.50"

    def test_real_ip_fallback(self):
        request = MockRequest(client_host="10.0.0.1", headers={"x-real-ip": " 198.51.100.7 "})
        assert get_client_ip(request) == "198.51.100.7"

    def test_client_host_when_no_proxy_headers(self):
        assert get_client_ip(MockRequest(client_host="10.0.0.9")) == "10.0.0.9"


# Fin del archivo tests/shared/http_utils/test_request_meta.py
