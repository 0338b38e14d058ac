from __future__ import annotations

from farmconnect.workers.asyncio_runner import run_async_job
from farmconnect.workers.celery_app import celery_app
from farmconnect.workers.tasks.offers_lifecycle_async import (
    run_offer_expiry_sweep_async as _run_offer_expiry_sweep_async,
    run_offer_expiry_warnings_async as _run_offer_expiry_warnings_async,
)
from farmconnect.workers.tasks.offers_lifecycle_schedule import configure_offers_lifecycle_schedule

run_offer_expiry_warnings_async = _run_offer_expiry_warnings_async
run_offer_expiry_sweep_async = _run_offer_expiry_sweep_async

__all__ = [
    "run_offer_expiry_sweep",
    "run_offer_expiry_sweep_async",
    "run_offer_expiry_warnings",
    "run_offer_expiry_warnings_async",
]


@celery_app.task(name="farmconnect.workers.tasks.offers_lifecycle.run_offer_expiry_warnings")
def run_offer_expiry_warnings() -> dict[str, object]:
    return run_async_job(run_offer_expiry_warnings_async())


@celery_app.task(name="farmconnect.workers.tasks.offers_lifecycle.run_offer_expiry_sweep")
def run_offer_expiry_sweep() -> dict[str, object]:
    return run_async_job(run_offer_expiry_sweep_async())


configure_offers_lifecycle_schedule(celery_app)
