# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/signature_verification.py

Verificación de firmas de webhooks de la pasarela.

- HMAC-SHA512 del body crudo con la secret key de la pasarela.
- La firma llega en hex, con o sin prefijo "0x".
- Se firma el body EXACTO recibido: nunca una copia re-serializada.
- Comparación en tiempo constante (hmac.compare_digest).

Fail-closed: sin secret configurado, ninguna firma es válida.

Autor: ReelPass
Fecha: 15/09/2026
"""
from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Firma hex (HMAC-SHA512) de un body; la usan también los tests."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha512).hexdigest()


def verify_gateway_signature(
    raw_body: bytes,
    signature: Optional[str],
    secret: Optional[str],
) -> bool:
    """
    Verifica la firma del webhook.

    Args:
        raw_body: bytes exactos del request
        signature: valor del header de firma
        secret: secret key de la pasarela

    Returns:
        True si la firma corresponde al body.
    """
    if not secret:
        logger.error("Webhook secret not configured; rejecting signature")
        return False
    if not signature:
        return False

    provided = signature.strip().lower()
    if provided.startswith("0x"):
        provided = provided[2:]

    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(expected.encode("ascii"), provided.encode("ascii", errors="replace"))


__all__ = ["compute_signature", "verify_gateway_signature"]

# Fin del archivo app/modules/payments/services/webhooks/signature_verification.py
