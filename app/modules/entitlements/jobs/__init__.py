# -*- coding: utf-8 -*-
"""
app/modules/entitlements/jobs/__init__.py

Jobs programados del módulo Entitlements.

Autor: ReelPass
Fecha: 19/09/2026
"""

from .expire_rentals_job import (
    EXPIRE_RENTALS_JOB_ID,
    expire_rentals,
    register_expire_rentals_job,
)

__all__ = [
    "expire_rentals",
    "register_expire_rentals_job",
    "EXPIRE_RENTALS_JOB_ID",
]
