from __future__ import annotations

from datetime import datetime, timedelta

from farmconnect.offers.constants import (
    DEFAULT_WARN_HORIZON,
    OFFER_STATE_ACTIVE,
    OFFER_STATE_EXPIRED,
    OFFER_STATE_EXPIRING_SOON,
    OFFER_STATE_NO_OFFER,
)


def classify_offer(
    *,
    discount_percent: int,
    offer_end_at: datetime | None,
    offer_expired: bool,
    now_utc: datetime,
    warn_horizon: timedelta = DEFAULT_WARN_HORIZON,
) -> str:
    """Place an offer window on the lifecycle at ``now_utc``.

    An offer whose end is already behind ``now_utc`` counts as expired even
    before the sweep has cleared its discount.
    """
    if offer_expired:
        return OFFER_STATE_EXPIRED
    if discount_percent <= 0 or offer_end_at is None:
        return OFFER_STATE_NO_OFFER
    if offer_end_at < now_utc:
        return OFFER_STATE_EXPIRED
    if offer_end_at <= now_utc + warn_horizon:
        return OFFER_STATE_EXPIRING_SOON
    return OFFER_STATE_ACTIVE
