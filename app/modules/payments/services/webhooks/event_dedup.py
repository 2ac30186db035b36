# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/event_dedup.py

Caché de deduplicación de webhooks ya procesados (camino rápido).

- En memoria: set LRU acotado (default 1000 llaves) por proceso.
- Con REDIS_URL: SET key 1 EX ttl, visible para todas las réplicas.

Es best-effort. La fuente de verdad es webhook_events.processed_at;
un reinicio que vacíe esta caché solo cuesta una consulta más.

Autor: ReelPass
Fecha: 15/09/2026
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional

from redis.exceptions import RedisError

from app.shared.config.settings_payments import get_payments_settings
from app.shared.redis import get_async_redis_client

logger = logging.getLogger(__name__)

REDIS_KEY_PREFIX = "webhook:processed:"


class ProcessedEventCache:
    """Set LRU acotado de llaves de eventos procesados."""

    def __init__(self, max_entries: int = 1000, ttl_seconds: int = 86_400):
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._keys: "OrderedDict[str, None]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._keys)

    def _remember_local(self, event_key: str) -> None:
        self._keys[event_key] = None
        self._keys.move_to_end(event_key)
        while len(self._keys) > self.max_entries:
            self._keys.popitem(last=False)

    async def contains(self, event_key: str) -> bool:
        if event_key in self._keys:
            self._keys.move_to_end(event_key)
            return True

        redis_client = await get_async_redis_client()
        if redis_client is None:
            return False
        try:
            found = bool(await redis_client.exists(REDIS_KEY_PREFIX + event_key))
        except (RedisError, OSError) as e:
            logger.warning("Webhook dedup Redis lookup failed: %s", e)
            return False
        if found:
            self._remember_local(event_key)
        return found

    async def add(self, event_key: str) -> None:
        self._remember_local(event_key)

        redis_client = await get_async_redis_client()
        if redis_client is None:
            return
        try:
            await redis_client.set(REDIS_KEY_PREFIX + event_key, "1", ex=self.ttl_seconds)
        except (RedisError, OSError) as e:
            logger.warning("Webhook dedup Redis write failed: %s", e)

    def clear(self) -> None:
        self._keys.clear()


_processed_cache: Optional[ProcessedEventCache] = None


def get_processed_event_cache() -> ProcessedEventCache:
    global _processed_cache
    if _processed_cache is None:
        settings = get_payments_settings()
        _processed_cache = ProcessedEventCache(
            max_entries=settings.webhook_dedup_max_entries,
            ttl_seconds=settings.webhook_dedup_ttl_seconds,
        )
    return _processed_cache


def reset_processed_event_cache() -> None:
    """Descarta la caché (tests)."""
    global _processed_cache
    _processed_cache = None


__all__ = [
    "ProcessedEventCache",
    "get_processed_event_cache",
    "reset_processed_event_cache",
]

# Fin del archivo app/modules/payments/services/webhooks/event_dedup.py
