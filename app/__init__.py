# -*- coding: utf-8 -*-
"""
app/__init__.py

Paquete principal del backend de ReelPass.

Módulos:
- app.modules.payments: pagos, wallet, webhooks de la pasarela
- app.modules.entitlements: rentas, compras y resolución de acceso
- app.modules.auth: verificación del JWT del proveedor de identidad
- app.shared: configuración, base de datos, Redis, middlewares y scheduler

Autor: ReelPass
Fecha: 02/09/2026
"""

# Fin del archivo app/__init__.py
