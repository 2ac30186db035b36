# -*- coding: utf-8 -*-
"""
app/modules/payments/metrics/exporters/prometheus_exporter.py

Exporter Prometheus para pagos, wallet y webhooks.
Registro dedicado (no el global de prometheus_client) para que los
tests puedan importar el módulo varias veces sin duplicar colectores.

Autor: ReelPass
Fecha: 11/09/2026
"""

from datetime import datetime, timezone
import logging

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
# Registro de Prometheus
# --------------------------------------------------------------------------
registry = CollectorRegistry()

# --------------------------------------------------------------------------
# Definición de métricas
# --------------------------------------------------------------------------

PAYMENTS_STARTED_TOTAL = Counter(
    "payments_started_total",
    "Pagos creados por proveedor y propósito",
    ["provider", "purpose"],
    registry=registry,
)

PAYMENTS_OUTCOME_TOTAL = Counter(
    "payments_outcome_total",
    "Pagos que alcanzan un estado terminal",
    ["provider", "purpose", "status"],
    registry=registry,
)

PAYMENTS_RECONCILIATION_TOTAL = Counter(
    "payments_needs_reconciliation_total",
    "Pagos cobrados sin entitlement (revisión manual)",
    ["purpose"],
    registry=registry,
)

WEBHOOKS_RECEIVED_TOTAL = Counter(
    "payments_webhook_received_total",
    "Webhooks recibidos",
    ["provider"],
    registry=registry,
)

WEBHOOKS_REJECTED_TOTAL = Counter(
    "payments_webhook_rejected_total",
    "Webhooks rechazados por razón",
    ["provider", "reason"],  # reason: invalid_signature/malformed_payload/rate_limited
    registry=registry,
)

WEBHOOKS_OUTCOME_TOTAL = Counter(
    "payments_webhook_outcome_total",
    "Webhooks por outcome (processed/duplicate/ignored/error)",
    ["provider", "outcome"],
    registry=registry,
)

WEBHOOKS_PROCESSING_SECONDS = Histogram(
    "payments_webhook_processing_seconds",
    "Tiempo de procesamiento de webhooks (segundos)",
    ["provider"],
    registry=registry,
)

AMOUNT_MISMATCH_TOTAL = Counter(
    "payments_amount_mismatch_total",
    "Montos confirmados por la pasarela distintos al del pago",
    ["provider"],
    registry=registry,
)

LEDGER_TRANSACTIONS_TOTAL = Counter(
    "wallet_ledger_transactions_total",
    "Movimientos aplicados al ledger de wallets",
    ["tx_type"],
    registry=registry,
)

LEDGER_REJECTED_TOTAL = Counter(
    "wallet_ledger_rejected_total",
    "Movimientos rechazados por saldo insuficiente",
    ["tx_type"],
    registry=registry,
)


# --------------------------------------------------------------------------
# Funciones auxiliares
# --------------------------------------------------------------------------
def render_prometheus_metrics() -> bytes:
    """Genera la salida actual de las métricas en formato Prometheus."""
    return generate_latest(registry)


def observe_payment_started(provider: str, purpose: str) -> None:
    PAYMENTS_STARTED_TOTAL.labels(provider=provider, purpose=purpose).inc()


def observe_payment_outcome(provider: str, purpose: str, status: str) -> None:
    PAYMENTS_OUTCOME_TOTAL.labels(provider=provider, purpose=purpose, status=status).inc()


def observe_needs_reconciliation(purpose: str) -> None:
    PAYMENTS_RECONCILIATION_TOTAL.labels(purpose=purpose).inc()


def observe_webhook_received(provider: str) -> None:
    WEBHOOKS_RECEIVED_TOTAL.labels(provider=provider).inc()


def observe_webhook_rejected(provider: str, reason: str) -> None:
    WEBHOOKS_REJECTED_TOTAL.labels(provider=provider, reason=reason).inc()
    logger.debug("[Prometheus] Webhook %s rejected reason=%s", provider, reason)


def observe_webhook_outcome(provider: str, outcome: str, duration: float) -> None:
    WEBHOOKS_OUTCOME_TOTAL.labels(provider=provider, outcome=outcome).inc()
    WEBHOOKS_PROCESSING_SECONDS.labels(provider=provider).observe(duration)
    logger.debug("[Prometheus] Webhook %s outcome=%s duration=%.4fs", provider, outcome, duration)


def observe_amount_mismatch(provider: str) -> None:
    AMOUNT_MISMATCH_TOTAL.labels(provider=provider).inc()


def observe_ledger_transaction(tx_type: str) -> None:
    LEDGER_TRANSACTIONS_TOTAL.labels(tx_type=tx_type).inc()


def observe_ledger_rejected(tx_type: str) -> None:
    LEDGER_REJECTED_TOTAL.labels(tx_type=tx_type).inc()


# --------------------------------------------------------------------------
# Health-check de Prometheus
# --------------------------------------------------------------------------
def prometheus_ping() -> dict:
    """Devuelve un simple dict para verificar salud del exporter."""
    return {
        "status": "ok",
        "service": "payments-metrics",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

# Fin del archivo app/modules/payments/metrics/exporters/prometheus_exporter.py
