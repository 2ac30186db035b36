# -*- coding: utf-8 -*-
"""
app/shared/config/settings_payments.py

Configuración de pagos, wallet y entitlements para ReelPass.

Descripción:
    Centraliza la configuración de la pasarela (Paystack-compatible),
    límites de monto, duraciones de renta, rate limits, deduplicación
    de webhooks y polling de estado.

Autor: ReelPass
Fecha: 02/09/2026
"""

from __future__ import annotations

from typing import Optional
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Configuración del sistema de pagos."""

    # =========================================================================
    # PASARELA
    # =========================================================================

    gateway_secret_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias="GATEWAY_SECRET_KEY",
        description="Secret key de la pasarela; firma HMAC de webhooks y auth de la API",
    )

    gateway_base_url: str = Field(
        default="https://api.paystack.co",
        validation_alias="GATEWAY_BASE_URL",
        description="URL base de la API de la pasarela",
    )

    gateway_callback_url: Optional[str] = Field(
        default=None,
        validation_alias="GATEWAY_CALLBACK_URL",
        description="URL a la que la pasarela redirige al usuario tras el checkout",
    )

    gateway_connect_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout de conexión hacia la pasarela",
    )

    gateway_read_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout de lectura hacia la pasarela",
    )

    webhook_signature_header: str = Field(
        default="x-provider-signature",
        description="Header que transporta la firma HMAC-SHA512 del webhook",
    )

    # =========================================================================
    # LÍMITES Y VALIDACIONES (unidades menores: kobo)
    # =========================================================================

    min_payment_amount: int = Field(
        default=100,
        description="Monto mínimo de pago en unidades menores",
    )

    max_payment_amount: int = Field(
        default=10_000_000,
        description="Monto máximo de pago en unidades menores",
    )

    default_currency: str = Field(
        default="NGN",
        description="Moneda por defecto de pagos y wallets",
    )

    # =========================================================================
    # RENTAS
    # =========================================================================

    rental_hours_movie: int = Field(default=48, description="Duración de renta de películas (horas)")
    rental_hours_episode: int = Field(default=48, description="Duración de renta de episodios (horas)")
    rental_hours_season: int = Field(default=336, description="Duración de renta de temporadas (horas)")

    # =========================================================================
    # RATE LIMITING
    # =========================================================================

    rate_limit_enabled: bool = Field(default=True, description="Habilita rate limiting")

    payment_rate_limit_requests: int = Field(
        default=10,
        description="Máximo de solicitudes de pago/ajuste por usuario en la ventana",
    )

    payment_rate_limit_window_seconds: int = Field(
        default=60,
        description="Ventana del rate limit de pagos (segundos)",
    )

    webhook_rate_limit_requests: int = Field(
        default=100,
        description="Máximo de webhooks por IP en la ventana",
    )

    webhook_rate_limit_window_seconds: int = Field(
        default=60,
        description="Ventana del rate limit de webhooks (segundos)",
    )

    rate_limit_max_tracked_keys: int = Field(
        default=10_000,
        description="Máximo de identificadores (usuarios o IPs) en memoria por limiter",
    )

    # =========================================================================
    # DEDUPLICACIÓN DE WEBHOOKS
    # =========================================================================

    webhook_dedup_max_entries: int = Field(
        default=1000,
        description="Capacidad del set en memoria de eventos procesados",
    )

    webhook_dedup_ttl_seconds: int = Field(
        default=86_400,
        description="TTL de las llaves de deduplicación en Redis",
    )

    # =========================================================================
    # POLLING DE ESTADO
    # =========================================================================

    poll_max_attempts: int = Field(default=10, description="Intentos máximos de polling")
    poll_interval_seconds: float = Field(default=2.0, description="Intervalo entre intentos")
    poll_timeout_seconds: float = Field(default=30.0, description="Techo de tiempo total del polling")

    # =========================================================================
    # AJUSTES ADMINISTRATIVOS
    # =========================================================================

    admin_adjustment_min_reason_length: int = Field(
        default=10,
        description="Longitud mínima del motivo de un ajuste manual de wallet",
    )

    refund_min_reason_length: int = Field(
        default=10,
        description="Longitud mínima del motivo de un reembolso administrativo",
    )

    @field_validator("max_payment_amount")
    @classmethod
    def _validate_max_amount(cls, v: int, info) -> int:
        min_amount = info.data.get("min_payment_amount", 0)
        if v < min_amount:
            raise ValueError("max_payment_amount must be >= min_payment_amount")
        return v

    @property
    def has_gateway_secret(self) -> bool:
        return bool(self.gateway_secret_key.get_secret_value())

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAYMENTS_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Singleton global
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


def reset_payments_settings() -> None:
    """Descarta el singleton (tests que cambian variables de entorno)."""
    global _payments_settings
    _payments_settings = None


__all__ = [
    "PaymentsSettings",
    "get_payments_settings",
    "reset_payments_settings",
]
# Fin del archivo app/shared/config/settings_payments.py
