# -*- coding: utf-8 -*-
"""
app/modules/entitlements/__init__.py

Módulo Entitlements: rentas, compras y resolución de acceso a contenido.

Autor: ReelPass
Fecha: 05/09/2026
"""
