from __future__ import annotations

import structlog
from redis.exceptions import RedisError

from farmconnect.messaging.sms_gateway import build_sms_gateway
from farmconnect.offers.lifecycle import build_offer_monitor
from farmconnect.workers.single_flight import single_flight
from farmconnect.workers.tasks.offers_lifecycle_config import (
    OFFER_EXPIRY_SWEEP_LOCK_NAME,
    OFFER_JOB_LOCK_TTL_SECONDS,
    OFFER_WARNING_SCAN_LOCK_NAME,
)

logger = structlog.get_logger("farmconnect.workers.tasks.offers_lifecycle")


def _already_running_result(job: str) -> dict[str, object]:
    result: dict[str, object] = {"job": job, "skipped": True, "reason": "already_running"}
    logger.info("offers_lifecycle_job_skipped", **result)
    return result


def _lock_unavailable_result(job: str) -> dict[str, object]:
    result: dict[str, object] = {"job": job, "error": "single_flight_unavailable"}
    logger.exception("offers_lifecycle_job_lock_failed", **result)
    return result


async def run_offer_expiry_warnings_async() -> dict[str, object]:
    try:
        async with single_flight(
            OFFER_WARNING_SCAN_LOCK_NAME,
            ttl_seconds=OFFER_JOB_LOCK_TTL_SECONDS,
        ) as lease:
            if not lease.acquired:
                return _already_running_result(OFFER_WARNING_SCAN_LOCK_NAME)
            gateway = build_sms_gateway()
            try:
                monitor = build_offer_monitor(gateway=gateway, heartbeat=lease.refresh)
                return await monitor.scan_and_warn()
            finally:
                await gateway.aclose()
    except RedisError:
        return _lock_unavailable_result(OFFER_WARNING_SCAN_LOCK_NAME)


async def run_offer_expiry_sweep_async() -> dict[str, object]:
    try:
        async with single_flight(
            OFFER_EXPIRY_SWEEP_LOCK_NAME,
            ttl_seconds=OFFER_JOB_LOCK_TTL_SECONDS,
        ) as lease:
            if not lease.acquired:
                return _already_running_result(OFFER_EXPIRY_SWEEP_LOCK_NAME)
            return await build_offer_monitor().sweep_expired()
    except RedisError:
        return _lock_unavailable_result(OFFER_EXPIRY_SWEEP_LOCK_NAME)
