from __future__ import annotations

from farmconnect.core.config import get_settings

settings = get_settings()


def _clamp_interval_seconds(value: int) -> int:
    return max(30, min(3600, int(value)))


def _clamp_lock_ttl_seconds(value: int) -> int:
    return max(60, min(6 * 3600, int(value)))


OFFER_WARNING_SCAN_INTERVAL_SECONDS = _clamp_interval_seconds(
    settings.offer_warning_scan_interval_seconds
)
OFFER_EXPIRY_SWEEP_INTERVAL_SECONDS = _clamp_interval_seconds(
    settings.offer_expiry_sweep_interval_seconds
)
OFFER_JOB_LOCK_TTL_SECONDS = _clamp_lock_ttl_seconds(settings.offer_job_lock_ttl_seconds)

OFFER_WARNING_SCAN_LOCK_NAME = "offers:expiry_warnings"
OFFER_EXPIRY_SWEEP_LOCK_NAME = "offers:expiry_sweep"

__all__ = [
    "OFFER_EXPIRY_SWEEP_INTERVAL_SECONDS",
    "OFFER_EXPIRY_SWEEP_LOCK_NAME",
    "OFFER_JOB_LOCK_TTL_SECONDS",
    "OFFER_WARNING_SCAN_INTERVAL_SECONDS",
    "OFFER_WARNING_SCAN_LOCK_NAME",
]
