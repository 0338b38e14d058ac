from datetime import timedelta

from farmconnect.offers.time_utils import format_time_left, remaining_hours_minutes
from tests.offers.offer_fixtures import NOW_UTC


def test_format_time_left_uses_floor_division() -> None:
    assert format_time_left(now_utc=NOW_UTC, offer_end_at=NOW_UTC + timedelta(minutes=125)) == "2h 5m"
    assert format_time_left(now_utc=NOW_UTC, offer_end_at=NOW_UTC + timedelta(minutes=59)) == "0h 59m"
    assert format_time_left(now_utc=NOW_UTC, offer_end_at=NOW_UTC) == "0h 0m"


def test_format_time_left_drops_partial_minutes() -> None:
    end = NOW_UTC + timedelta(minutes=61, seconds=59)
    assert format_time_left(now_utc=NOW_UTC, offer_end_at=end) == "1h 1m"


def test_remaining_hours_minutes_clamps_past_end_to_zero() -> None:
    assert remaining_hours_minutes(now_utc=NOW_UTC, offer_end_at=NOW_UTC - timedelta(hours=2)) == (0, 0)
