# -*- coding: utf-8 -*-
"""
app/modules/payments/__init__.py

Módulo de pagos de ReelPass.

Este módulo gestiona:
- Registros de pagos (wallet interna y pasarela)
- Wallet y ledger inmutable de movimientos
- Webhooks de la pasarela (firma, deduplicación, despacho)
- Fulfillment de rentas, compras y recargas al completar un pago

Estructura:
- enums: Tipos de datos (PaymentStatus, PaymentPurpose, WalletTxType...)
- models: Modelos ORM (Payment, Wallet, WalletTransaction, WebhookEvent)
- schemas: Validación y serialización Pydantic
- repositories: Acceso a datos
- services: Lógica de negocio de bajo nivel (ledger, wallet, webhooks)
- facades: Orquestación de alto nivel (process_payment, handle_gateway_webhook)
- routes: Endpoints FastAPI

Los submódulos se importan explícitamente; este paquete no re-exporta
nada para evitar ciclos con entitlements.

Autor: ReelPass
Fecha: 05/09/2026
"""
