from farmconnect.offers.classification import classify_offer
from farmconnect.offers.lifecycle import OfferLifecycleMonitor, build_offer_monitor
from farmconnect.offers.time_utils import format_time_left

__all__ = [
    "OfferLifecycleMonitor",
    "build_offer_monitor",
    "classify_offer",
    "format_time_left",
]
