from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def remaining_hours_minutes(*, now_utc: datetime, offer_end_at: datetime) -> tuple[int, int]:
    remaining_minutes = max(0, int((offer_end_at - now_utc).total_seconds())) // 60
    return remaining_minutes // 60, remaining_minutes % 60


def format_time_left(*, now_utc: datetime, offer_end_at: datetime) -> str:
    hours, minutes = remaining_hours_minutes(now_utc=now_utc, offer_end_at=offer_end_at)
    return f"{hours}h {minutes}m"
