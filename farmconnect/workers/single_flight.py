from __future__ import annotations

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

import structlog
from redis.asyncio import Redis
from redis.asyncio.lock import Lock
from redis.exceptions import LockError

from farmconnect.core.config import get_settings

logger = structlog.get_logger(__name__)

LOCK_KEY_PREFIX = "farmconnect:single_flight:"


class SingleFlightLease:
    """Ownership of a single-flight lock for the duration of one job run.

    ``refresh`` resets the lock TTL; long runs call it as they make progress.
    It is rate limited to once per ``refresh_every_seconds`` and raises
    ``LockError`` once the lock has been lost.
    """

    def __init__(
        self,
        *,
        name: str,
        lock: Lock,
        acquired: bool,
        refresh_every_seconds: float,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.acquired = acquired
        self._lock = lock
        self._refresh_every_seconds = refresh_every_seconds
        self._monotonic = monotonic
        self._refreshed_at = monotonic()

    async def refresh(self) -> None:
        if not self.acquired:
            raise LockError(f"single-flight lock {self.name!r} is not held")
        now = self._monotonic()
        if now - self._refreshed_at < self._refresh_every_seconds:
            return
        await self._lock.reacquire()
        self._refreshed_at = now


@asynccontextmanager
async def single_flight(
    name: str,
    *,
    ttl_seconds: int,
    redis_url: str | None = None,
) -> AsyncIterator[SingleFlightLease]:
    """Hold a Redis lock for ``name`` while the body runs.

    The yielded lease has ``acquired=False`` without blocking when another
    holder already owns the lock. The TTL bounds how long a crashed worker can
    keep the lock; a live run keeps it through ``lease.refresh()``.
    """
    timeout = max(1, int(ttl_seconds))
    client = Redis.from_url(redis_url or get_settings().redis_url)
    lock = client.lock(f"{LOCK_KEY_PREFIX}{name}", timeout=timeout)
    lease: SingleFlightLease | None = None
    try:
        acquired = bool(await lock.acquire(blocking=False))
        if not acquired:
            logger.info("single_flight_busy", job=name)
        lease = SingleFlightLease(
            name=name,
            lock=lock,
            acquired=acquired,
            refresh_every_seconds=timeout / 3,
        )
        yield lease
    finally:
        if lease is not None and lease.acquired:
            try:
                await lock.release()
            except LockError:
                logger.warning("single_flight_lock_lost", job=name, ttl_seconds=ttl_seconds)
        await client.aclose()
