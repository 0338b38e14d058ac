from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ExpiringOffer:
    product_id: int
    title: str
    discount_percent: int
    offer_end_at: datetime


@dataclass(frozen=True, slots=True)
class SmsRecipient:
    user_id: int
    phone: str


@dataclass(frozen=True, slots=True)
class ActiveOffer:
    product_id: int
    title: str
    category: str
    farmer_user_id: int
    discount_percent: int
    offer_start_at: datetime | None
    offer_end_at: datetime
    state: str
    time_left: str
    sms_warning_sent: bool
