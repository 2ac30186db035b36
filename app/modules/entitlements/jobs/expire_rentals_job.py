# -*- coding: utf-8 -*-
"""
app/modules/entitlements/jobs/expire_rentals_job.py

Job programado para marcar como expired las rentas vencidas.

Es mantenimiento: el resolver de acceso compara expiration_date con
now en cada consulta y no depende de que este job haya corrido.

Autor: ReelPass
Fecha: 19/09/2026
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.entitlements.repositories.rental_repository import RentalRepository
from app.modules.payments.utils.datetime_helpers import utcnow
from app.shared.database.database import session_scope
from app.shared.scheduler import get_scheduler

logger = logging.getLogger(__name__)

# ID del job para referencia
EXPIRE_RENTALS_JOB_ID = "entitlements_expire_rentals"

DEFAULT_INTERVAL_MINUTES = 15


async def expire_rentals(session: Optional[AsyncSession] = None) -> int:
    """
    Marca como 'expired' las rentas 'active' con expiration_date pasada.

    Args:
        session: Sesión async opcional (si no se provee, crea una nueva)

    Returns:
        Número de rentas expiradas
    """
    now = utcnow()
    repo = RentalRepository()

    async def _do_expire(sess: AsyncSession) -> int:
        count = await repo.expire_overdue(sess, now=now)
        await sess.commit()
        return count

    if session is not None:
        expired_count = await _do_expire(session)
    else:
        async with session_scope() as sess:
            expired_count = await _do_expire(sess)

    if expired_count > 0:
        logger.info("Expired %d rentals (cutoff=%s)", expired_count, now.isoformat())
    else:
        logger.debug("No rentals to expire")

    return expired_count


def register_expire_rentals_job(interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> str:
    """
    Registra el job de expiración en el scheduler global.

    Returns:
        ID del job registrado
    """
    scheduler = get_scheduler()
    job_id = scheduler.add_interval_job(
        func=expire_rentals,
        job_id=EXPIRE_RENTALS_JOB_ID,
        minutes=interval_minutes,
    )
    logger.info("Registered expire rentals job: id=%s interval=%d min", job_id, interval_minutes)
    return job_id


__all__ = [
    "expire_rentals",
    "register_expire_rentals_job",
    "EXPIRE_RENTALS_JOB_ID",
]

# Fin del archivo app/modules/entitlements/jobs/expire_rentals_job.py
