from datetime import timedelta

OFFER_STATE_NO_OFFER = "NO_OFFER"
OFFER_STATE_ACTIVE = "ACTIVE"
OFFER_STATE_EXPIRING_SOON = "EXPIRING_SOON"
OFFER_STATE_EXPIRED = "EXPIRED"

DEFAULT_WARN_HORIZON = timedelta(hours=1)

MIN_DISCOUNT_PERCENT = 1
MAX_DISCOUNT_PERCENT = 100
