# -*- coding: utf-8 -*-
"""
app/shared/redis/client.py

Cliente Redis async compartido (singleton).
Lo usan el rate limiter distribuido y la deduplicación de webhooks.

Características:
- Conexión perezosa (nada bloquea al importar)
- Un solo cliente compartido por proceso
- Fail-open: devuelve None si REDIS_URL no está configurado o Redis no responde

Autor: ReelPass
Fecha: 04/09/2026
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClientManager:
    """
    Administra un único cliente Redis async.

    Si Redis no está disponible, get_client() devuelve None y los
    consumidores caen a su implementación en memoria.
    """

    _instance: Optional["RedisClientManager"] = None

    @classmethod
    def get_instance(cls) -> "RedisClientManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    async def reset_instance_async(cls) -> None:
        """Cierra y descarta el singleton (tests)."""
        if cls._instance is not None:
            await cls._instance.close()
        cls._instance = None

    def __init__(self, redis_url: Optional[str] = None):
        self._redis_url = redis_url or os.getenv("REDIS_URL")
        self._client: Optional[aioredis.Redis] = None
        self._connected: Optional[bool] = None  # None = no intentado
        self._connect_lock: Optional[asyncio.Lock] = None

        if self._redis_url:
            logger.debug("RedisClientManager: configured (lazy connect) pid=%d", os.getpid())
        else:
            logger.debug("RedisClientManager: REDIS_URL not configured pid=%d", os.getpid())

    @property
    def is_configured(self) -> bool:
        return bool(self._redis_url)

    async def get_client(self) -> Optional[aioredis.Redis]:
        """
        Cliente Redis (conexión perezosa).

        Returns:
            Cliente o None si no está configurado / falló la conexión.
        """
        if self._connected is not None:
            return self._client if self._connected else None

        if not self.is_configured:
            self._connected = False
            return None

        if self._connect_lock is None:
            self._connect_lock = asyncio.Lock()

        async with self._connect_lock:
            if self._connected is not None:
                return self._client if self._connected else None

            try:
                self._client = aioredis.from_url(
                    self._redis_url,
                    decode_responses=True,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                await self._client.ping()
                self._connected = True
                logger.info("RedisClientManager: connected pid=%d", os.getpid())
                return self._client
            except (RedisError, OSError) as e:
                logger.warning("RedisClientManager: connection failed: %s", e)
                self._connected = False
                self._client = None
                return None

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning("RedisClientManager: close error: %s", e)
            finally:
                self._client = None
                self._connected = None


async def get_async_redis_client() -> Optional[aioredis.Redis]:
    """Cliente Redis canónico, o None si no está disponible."""
    return await RedisClientManager.get_instance().get_client()


async def close_async_redis_client() -> None:
    await RedisClientManager.reset_instance_async()


__all__ = [
    "RedisClientManager",
    "get_async_redis_client",
    "close_async_redis_client",
]
