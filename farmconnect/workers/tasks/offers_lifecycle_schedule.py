from __future__ import annotations

from farmconnect.workers.tasks.offers_lifecycle_config import (
    OFFER_EXPIRY_SWEEP_INTERVAL_SECONDS,
    OFFER_WARNING_SCAN_INTERVAL_SECONDS,
)


def configure_offers_lifecycle_schedule(celery_app) -> None:
    celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
    celery_app.conf.beat_schedule.update(
        {
            "offers-expiry-warnings": {
                "task": "farmconnect.workers.tasks.offers_lifecycle.run_offer_expiry_warnings",
                "schedule": float(OFFER_WARNING_SCAN_INTERVAL_SECONDS),
                "options": {"queue": "q_normal", "expires": OFFER_WARNING_SCAN_INTERVAL_SECONDS},
            },
            "offers-expiry-sweep": {
                "task": "farmconnect.workers.tasks.offers_lifecycle.run_offer_expiry_sweep",
                "schedule": float(OFFER_EXPIRY_SWEEP_INTERVAL_SECONDS),
                "options": {"queue": "q_normal", "expires": OFFER_EXPIRY_SWEEP_INTERVAL_SECONDS},
            },
        }
    )
