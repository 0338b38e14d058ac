from farmconnect.workers.tasks.offers_lifecycle import (
    run_offer_expiry_sweep,
    run_offer_expiry_warnings,
)

__all__ = [
    "run_offer_expiry_sweep",
    "run_offer_expiry_warnings",
]
