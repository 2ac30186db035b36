# -*- coding: utf-8 -*-
"""
app/shared/__init__.py

Infraestructura compartida: configuración, base de datos, Redis,
middlewares HTTP y scheduler.
"""

# Fin del archivo app/shared/__init__.py
