# -*- coding: utf-8 -*-
"""Utilidades del módulo Payments."""
