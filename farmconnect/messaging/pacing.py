from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from farmconnect.messaging.sms_gateway import SmsGateway, SmsSendResult

SleepFn = Callable[[float], Awaitable[None]]
MonotonicFn = Callable[[], float]

DEFAULT_SEND_INTERVAL_SECONDS = 1.1


class PacedSender:
    """Serializes gateway calls with a fixed minimum gap between two sends.

    The first send goes out immediately; every later one waits until
    ``interval_seconds`` have passed since the previous send started.
    """

    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_SEND_INTERVAL_SECONDS,
        sleep: SleepFn = asyncio.sleep,
        monotonic: MonotonicFn = time.monotonic,
    ) -> None:
        self._interval = max(0.0, float(interval_seconds))
        self._sleep = sleep
        self._monotonic = monotonic
        self._last_send_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    async def _wait_turn(self) -> None:
        if self._last_send_at is not None:
            elapsed = self._monotonic() - self._last_send_at
            if elapsed < self._interval:
                await self._sleep(self._interval - elapsed)
        self._last_send_at = self._monotonic()

    async def send(self, gateway: SmsGateway, phone: str, message: str) -> SmsSendResult:
        async with self._lock:
            await self._wait_turn()
            return await gateway.send(phone, message)
