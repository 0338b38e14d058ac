from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

import structlog

from farmconnect.messaging.pacing import PacedSender
from farmconnect.messaging.sms_gateway import SmsGateway

logger = structlog.get_logger(__name__)

Heartbeat = Callable[[], Awaitable[None]]


async def send_bulk_sms(
    *,
    gateway: SmsGateway,
    sender: PacedSender,
    phones: Sequence[str],
    message: str,
    heartbeat: Heartbeat | None = None,
) -> dict[str, object]:
    """Send ``message`` to every phone in order through the paced sender.

    ``heartbeat`` runs before each send; an exception from it stops the batch
    and propagates to the caller.
    """
    sent = 0
    failed = 0
    results: list[dict[str, object]] = []

    for phone in phones:
        if heartbeat is not None:
            await heartbeat()
        outcome = await sender.send(gateway, phone, message)
        if outcome.success:
            sent += 1
        else:
            failed += 1
        results.append(
            {
                "phone": phone,
                "success": outcome.success,
                "sid": outcome.sid,
                "error": outcome.error,
            }
        )

    result: dict[str, object] = {
        "total": len(phones),
        "sent": sent,
        "failed": failed,
        "results": results,
    }
    logger.info("sms_bulk_send_finished", total=len(phones), sent=sent, failed=failed)
    return result
