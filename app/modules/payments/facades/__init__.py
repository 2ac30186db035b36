# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/__init__.py

Punto de entrada del paquete de fachadas del módulo Payments.

Diseño:
- Para evitar dependencias circulares este __init__ NO importa submódulos.
- Cada facade se importa explícitamente desde su paquete:

      from app.modules.payments.facades.payments import PaymentProcessor
      from app.modules.payments.facades.webhooks import handle_gateway_webhook

Autor: ReelPass
Fecha: 17/09/2026
"""

__all__: list[str] = []

# Fin del archivo app/modules/payments/facades/__init__.py
