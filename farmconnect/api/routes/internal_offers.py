from __future__ import annotations

from datetime import datetime, timedelta

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status
from pydantic import BaseModel, Field

from farmconnect.api.internal_access import require_internal_access
from farmconnect.core.config import get_settings
from farmconnect.db.session import SessionLocal
from farmconnect.offers.catalog import clear_offer_window, configure_offer_window, list_active_offers
from farmconnect.offers.errors import OfferProductNotFoundError, OfferWindowInvalidError
from farmconnect.offers.time_utils import utc_now
from farmconnect.offers.types import ActiveOffer
from farmconnect.workers.tasks.offers_lifecycle import (
    run_offer_expiry_sweep,
    run_offer_expiry_warnings,
)

router = APIRouter(
    tags=["internal", "offers"],
    dependencies=[Depends(require_internal_access)],
)
logger = structlog.get_logger(__name__)


class OfferWindowRequest(BaseModel):
    discount_percent: int = Field(ge=1, le=100)
    offer_start_at: datetime | None = None
    offer_end_at: datetime


class ActiveOfferResponse(BaseModel):
    product_id: int
    title: str
    category: str
    farmer_user_id: int
    discount_percent: int = Field(ge=0, le=100)
    offer_start_at: datetime | None
    offer_end_at: datetime
    state: str
    time_left: str
    sms_warning_sent: bool


class ActiveOffersResponse(BaseModel):
    generated_at: datetime
    warn_horizon_seconds: int = Field(ge=0)
    offers: list[ActiveOfferResponse]


class EnqueuedJobResponse(BaseModel):
    job: str
    task_id: str


def _warn_horizon() -> timedelta:
    return timedelta(seconds=max(60, int(get_settings().offer_warn_horizon_seconds)))


def _offer_response(offer: ActiveOffer) -> ActiveOfferResponse:
    return ActiveOfferResponse(
        product_id=offer.product_id,
        title=offer.title,
        category=offer.category,
        farmer_user_id=offer.farmer_user_id,
        discount_percent=offer.discount_percent,
        offer_start_at=offer.offer_start_at,
        offer_end_at=offer.offer_end_at,
        state=offer.state,
        time_left=offer.time_left,
        sms_warning_sent=offer.sms_warning_sent,
    )


@router.get("/internal/offers/active", response_model=ActiveOffersResponse)
async def get_active_offers() -> ActiveOffersResponse:
    now_utc = utc_now()
    warn_horizon = _warn_horizon()
    async with SessionLocal.begin() as session:
        offers = await list_active_offers(session, now_utc=now_utc, warn_horizon=warn_horizon)
    return ActiveOffersResponse(
        generated_at=now_utc,
        warn_horizon_seconds=int(warn_horizon.total_seconds()),
        offers=[_offer_response(offer) for offer in offers],
    )


@router.put("/internal/offers/{product_id}/window", response_model=ActiveOfferResponse)
async def put_offer_window(
    payload: OfferWindowRequest,
    product_id: int = Path(ge=1),
) -> ActiveOfferResponse:
    now_utc = utc_now()
    try:
        async with SessionLocal.begin() as session:
            offer = await configure_offer_window(
                session,
                product_id=product_id,
                discount_percent=payload.discount_percent,
                offer_start_at=payload.offer_start_at or now_utc,
                offer_end_at=payload.offer_end_at,
                now_utc=now_utc,
                warn_horizon=_warn_horizon(),
            )
    except OfferWindowInvalidError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": "E_OFFER_WINDOW_INVALID", "reason": str(exc)},
        ) from exc
    except OfferProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "E_PRODUCT_NOT_FOUND"},
        ) from exc

    logger.info(
        "offer_window_configured",
        product_id=product_id,
        discount_percent=offer.discount_percent,
        offer_end_at=offer.offer_end_at.isoformat(),
    )
    return _offer_response(offer)


@router.delete("/internal/offers/{product_id}/window", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offer_window(product_id: int = Path(ge=1)) -> None:
    try:
        async with SessionLocal.begin() as session:
            await clear_offer_window(session, product_id=product_id, now_utc=utc_now())
    except OfferProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "E_PRODUCT_NOT_FOUND"},
        ) from exc
    logger.info("offer_window_cleared", product_id=product_id)


@router.post(
    "/internal/offers/jobs/warnings",
    response_model=EnqueuedJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def enqueue_offer_expiry_warnings() -> EnqueuedJobResponse:
    async_result = run_offer_expiry_warnings.delay()
    return EnqueuedJobResponse(job="offer_expiry_warnings", task_id=str(async_result.id))


@router.post(
    "/internal/offers/jobs/sweep",
    response_model=EnqueuedJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def enqueue_offer_expiry_sweep() -> EnqueuedJobResponse:
    async_result = run_offer_expiry_sweep.delay()
    return EnqueuedJobResponse(job="offer_expiry_sweep", task_id=str(async_result.id))
