# -*- coding: utf-8 -*-
"""
app/modules/payments/middleware/rate_limiter.py

Rate limiter de ventana deslizante para pagos y webhooks.

- Pagos y ajustes de wallet: por usuario autenticado (default 10/min)
- Webhooks: por IP del cliente (default 100/min)

Con REDIS_URL configurado las ventanas viven en Redis (sorted sets) y
las comparten todas las réplicas; sin Redis, o si Redis falla, se usa
la ventana en memoria del proceso. El estado es best-effort: reiniciar
el proceso lo vacía y nada de la contabilidad de dinero depende de él.

La ventana en memoria se barre cada `window_seconds`: los identificadores
sin requests dentro de la ventana se descartan. Además el número de
identificadores está acotado por `max_keys`; al llegar al tope se barre y,
si no alcanza, se descartan los de actividad más antigua.

Autor: ReelPass
Fecha: 10/09/2026
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from fastapi import Depends, Request
from redis.exceptions import RedisError

from app.modules.auth.dependencies import AuthenticatedUser, get_current_user
from app.modules.payments.errors import RateLimitError
from app.shared.config.settings_payments import get_payments_settings
from app.shared.http_utils.request_meta import get_client_ip
from app.shared.redis import get_async_redis_client

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYS = 10_000


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int = 0


class SlidingWindowRateLimiter:
    """
    Rate limiter con ventana deslizante en memoria.

    Seguro para FastAPI async: is_allowed no cede el control al event loop
    entre la lectura y el registro.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        *,
        namespace: str = "default",
        max_keys: int = DEFAULT_MAX_KEYS,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.namespace = namespace
        self.max_keys = max(1, max_keys)
        # Dict[identificador] -> List[timestamp]
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._next_sweep = time.time() + window_seconds

    def _cleanup_old_requests(self, key: str, current_time: float) -> None:
        """Elimina requests fuera de la ventana."""
        cutoff = current_time - self.window_seconds
        kept = [ts for ts in self._requests[key] if ts > cutoff]
        if kept:
            self._requests[key] = kept
        else:
            self._requests.pop(key, None)

    def sweep(self, current_time: Optional[float] = None) -> int:
        """
        Descarta los identificadores sin requests dentro de la ventana y,
        si aun así se llega a max_keys, los de actividad más antigua.

        Returns:
            Número de identificadores descartados.
        """
        now = time.time() if current_time is None else current_time
        cutoff = now - self.window_seconds
        stale = [key for key, timestamps in self._requests.items() if not timestamps or timestamps[-1] <= cutoff]
        for key in stale:
            del self._requests[key]

        # Deja sitio para el identificador que se está registrando
        overflow = len(self._requests) - self.max_keys + 1
        if overflow > 0:
            oldest = sorted(self._requests, key=lambda k: self._requests[k][-1])[:overflow]
            for key in oldest:
                del self._requests[key]
            logger.warning(
                "Rate limiter %s over %s tracked keys, evicted %s active key(s)",
                self.namespace,
                self.max_keys,
                len(oldest),
            )

        self._next_sweep = now + self.window_seconds
        return len(stale) + max(overflow, 0)

    def is_allowed(self, key: str) -> Tuple[bool, int]:
        """
        Verifica si un identificador puede hacer una request.

        Returns:
            Tuple[is_allowed, remaining_requests]
        """
        current_time = time.time()
        if current_time >= self._next_sweep or (
            key not in self._requests and len(self._requests) >= self.max_keys
        ):
            self.sweep(current_time)
        self._cleanup_old_requests(key, current_time)

        current_count = len(self._requests.get(key, ()))
        if current_count >= self.max_requests:
            return False, 0

        self._requests[key].append(current_time)
        return True, self.max_requests - current_count - 1

    def get_retry_after(self, key: str) -> int:
        """Segundos hasta que el identificador pueda volver a hacer requests."""
        timestamps = self._requests.get(key)
        if not timestamps:
            return 0
        retry_after = int(min(timestamps) + self.window_seconds - time.time()) + 1
        return max(1, retry_after)

    async def check(self, key: str) -> RateLimitDecision:
        allowed, remaining = self.is_allowed(key)
        if allowed:
            return RateLimitDecision(allowed=True, remaining=remaining)
        return RateLimitDecision(allowed=False, remaining=0, retry_after=self.get_retry_after(key))

    def __len__(self) -> int:
        return len(self._requests)

    def reset(self) -> None:
        """Limpia todos los registros (útil para tests)."""
        self._requests.clear()
        self._next_sweep = time.time() + self.window_seconds


class RedisSlidingWindowRateLimiter:
    """
    Misma ventana deslizante sobre un sorted set de Redis por identificador.

    Si Redis falla a mitad de camino se delega en el limiter en memoria.
    """

    def __init__(self, redis_client, fallback: SlidingWindowRateLimiter):
        self.redis = redis_client
        self.fallback = fallback
        self.max_requests = fallback.max_requests
        self.window_seconds = fallback.window_seconds

    def _key(self, key: str) -> str:
        return f"rl:{self.fallback.namespace}:{key}"

    async def check(self, key: str) -> RateLimitDecision:
        redis_key = self._key(key)
        now = time.time()
        window_start = now - self.window_seconds
        try:
            pipe = self.redis.pipeline()
            pipe.zremrangebyscore(redis_key, 0, window_start)
            pipe.zcard(redis_key)
            pipe.zrange(redis_key, 0, 0, withscores=True)
            _, count, oldest = await pipe.execute()

            if count >= self.max_requests:
                oldest_ts = oldest[0][1] if oldest else now
                retry_after = max(1, int(oldest_ts + self.window_seconds - now) + 1)
                return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

            pipe = self.redis.pipeline()
            pipe.zadd(redis_key, {f"{now}:{uuid.uuid4().hex[:8]}": now})
            pipe.expire(redis_key, self.window_seconds + 1)
            await pipe.execute()
            return RateLimitDecision(allowed=True, remaining=self.max_requests - count - 1)
        except (RedisError, OSError) as e:
            logger.warning("Rate limiter Redis error, using in-memory window: %s", e)
            return await self.fallback.check(key)


# ---------------------------------------------------------------------------
# Instancias globales
# ---------------------------------------------------------------------------
_payment_rate_limiter: Optional[SlidingWindowRateLimiter] = None
_webhook_rate_limiter: Optional[SlidingWindowRateLimiter] = None


def get_payment_rate_limiter() -> SlidingWindowRateLimiter:
    global _payment_rate_limiter
    if _payment_rate_limiter is None:
        settings = get_payments_settings()
        _payment_rate_limiter = SlidingWindowRateLimiter(
            settings.payment_rate_limit_requests,
            settings.payment_rate_limit_window_seconds,
            namespace="payments",
            max_keys=settings.rate_limit_max_tracked_keys,
        )
    return _payment_rate_limiter


def get_webhook_rate_limiter() -> SlidingWindowRateLimiter:
    global _webhook_rate_limiter
    if _webhook_rate_limiter is None:
        settings = get_payments_settings()
        _webhook_rate_limiter = SlidingWindowRateLimiter(
            settings.webhook_rate_limit_requests,
            settings.webhook_rate_limit_window_seconds,
            namespace="webhooks",
            max_keys=settings.rate_limit_max_tracked_keys,
        )
    return _webhook_rate_limiter


def reset_rate_limiters() -> None:
    """Descarta las instancias (tests que cambian límites)."""
    global _payment_rate_limiter, _webhook_rate_limiter
    _payment_rate_limiter = None
    _webhook_rate_limiter = None


async def _check(limiter: SlidingWindowRateLimiter, key: str) -> RateLimitDecision:
    redis_client = await get_async_redis_client()
    if redis_client is not None:
        return await RedisSlidingWindowRateLimiter(redis_client, limiter).check(key)
    return await limiter.check(key)


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------
async def check_webhook_rate_limit(request: Request) -> None:
    """
    Rate limit de webhooks por IP.

    Uso en rutas:
        @router.post("/gateway", dependencies=[Depends(check_webhook_rate_limit)])

    Raises:
        RateLimitError (429) si se excede el límite.
    """
    if not get_payments_settings().rate_limit_enabled:
        return

    client_ip = get_client_ip(request) or "unknown"
    decision = await _check(get_webhook_rate_limiter(), client_ip)

    if not decision.allowed:
        logger.warning(
            "Webhook rate limit exceeded for IP %s. Retry after %ss",
            client_ip,
            decision.retry_after,
        )
        raise RateLimitError(
            f"Too many requests. Retry after {decision.retry_after} seconds.",
            retry_after=decision.retry_after,
            context={"client_ip": client_ip},
        )


async def check_payment_rate_limit(
    user: AuthenticatedUser = Depends(get_current_user),
) -> None:
    """Rate limit de endpoints de pago que mutan estado, por usuario."""
    if not get_payments_settings().rate_limit_enabled:
        return

    decision = await _check(get_payment_rate_limiter(), user.user_id)

    if not decision.allowed:
        logger.warning(
            "Payment rate limit exceeded for user %s. Retry after %ss",
            user.user_id,
            decision.retry_after,
        )
        raise RateLimitError(
            f"Too many requests. Retry after {decision.retry_after} seconds.",
            retry_after=decision.retry_after,
            context={"user_id": user.user_id},
        )


__all__ = [
    "RateLimitDecision",
    "SlidingWindowRateLimiter",
    "RedisSlidingWindowRateLimiter",
    "get_payment_rate_limiter",
    "get_webhook_rate_limiter",
    "reset_rate_limiters",
    "check_webhook_rate_limit",
    "check_payment_rate_limit",
]

# Fin del archivo app/modules/payments/middleware/rate_limiter.py
