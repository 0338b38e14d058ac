from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from farmconnect.db.models.products import Product
from farmconnect.db.repo.products_repo import ProductsRepo
from farmconnect.offers.classification import classify_offer
from farmconnect.offers.constants import (
    DEFAULT_WARN_HORIZON,
    MAX_DISCOUNT_PERCENT,
    MIN_DISCOUNT_PERCENT,
)
from farmconnect.offers.errors import OfferProductNotFoundError, OfferWindowInvalidError
from farmconnect.offers.time_utils import format_time_left
from farmconnect.offers.types import ActiveOffer


def validate_offer_window(
    *,
    discount_percent: int,
    offer_start_at: datetime,
    offer_end_at: datetime,
    now_utc: datetime,
) -> None:
    if not MIN_DISCOUNT_PERCENT <= discount_percent <= MAX_DISCOUNT_PERCENT:
        raise OfferWindowInvalidError("discount_percent_out_of_range")
    if offer_start_at.tzinfo is None or offer_end_at.tzinfo is None:
        raise OfferWindowInvalidError("offer_window_timezone_required")
    if offer_end_at <= offer_start_at:
        raise OfferWindowInvalidError("offer_window_end_before_start")
    if offer_end_at <= now_utc:
        raise OfferWindowInvalidError("offer_window_already_ended")


def _active_offer_from_product(
    product: Product,
    *,
    now_utc: datetime,
    warn_horizon: timedelta,
) -> ActiveOffer | None:
    if product.offer_end_at is None:
        return None
    return ActiveOffer(
        product_id=int(product.id),
        title=str(product.title),
        category=str(product.category),
        farmer_user_id=int(product.farmer_user_id),
        discount_percent=int(product.discount_percent),
        offer_start_at=product.offer_start_at,
        offer_end_at=product.offer_end_at,
        state=classify_offer(
            discount_percent=int(product.discount_percent),
            offer_end_at=product.offer_end_at,
            offer_expired=bool(product.offer_expired),
            now_utc=now_utc,
            warn_horizon=warn_horizon,
        ),
        time_left=format_time_left(now_utc=now_utc, offer_end_at=product.offer_end_at),
        sms_warning_sent=bool(product.sms_warning_sent),
    )


async def list_active_offers(
    session: AsyncSession,
    *,
    now_utc: datetime,
    warn_horizon: timedelta = DEFAULT_WARN_HORIZON,
) -> list[ActiveOffer]:
    products = await ProductsRepo.list_active_offers(session, now_utc=now_utc)
    offers: list[ActiveOffer] = []
    for product in products:
        offer = _active_offer_from_product(product, now_utc=now_utc, warn_horizon=warn_horizon)
        if offer is not None:
            offers.append(offer)
    return offers


async def configure_offer_window(
    session: AsyncSession,
    *,
    product_id: int,
    discount_percent: int,
    offer_start_at: datetime,
    offer_end_at: datetime,
    now_utc: datetime,
    warn_horizon: timedelta = DEFAULT_WARN_HORIZON,
) -> ActiveOffer:
    """Open a new offer window, re-arming the warning and expiry flags."""
    validate_offer_window(
        discount_percent=discount_percent,
        offer_start_at=offer_start_at,
        offer_end_at=offer_end_at,
        now_utc=now_utc,
    )
    product = await ProductsRepo.configure_offer_window(
        session,
        product_id=product_id,
        discount_percent=discount_percent,
        offer_start_at=offer_start_at,
        offer_end_at=offer_end_at,
        now_utc=now_utc,
    )
    if product is None:
        raise OfferProductNotFoundError(str(product_id))

    offer = _active_offer_from_product(product, now_utc=now_utc, warn_horizon=warn_horizon)
    if offer is None:
        raise OfferWindowInvalidError("offer_window_not_persisted")
    return offer


async def clear_offer_window(
    session: AsyncSession,
    *,
    product_id: int,
    now_utc: datetime,
) -> None:
    cleared = await ProductsRepo.clear_offer_window(
        session,
        product_id=product_id,
        now_utc=now_utc,
    )
    if not cleared:
        raise OfferProductNotFoundError(str(product_id))
