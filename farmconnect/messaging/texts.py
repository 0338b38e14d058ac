OFFER_EXPIRY_SMS = (
    "⏰ LAST CHANCE! Offer on {product_name} ({discount}% OFF) ends in {time_left}. "
    "Grab it now! - FarmConnect"
)


def build_offer_expiry_sms(*, product_name: str, discount_percent: int, time_left: str) -> str:
    return OFFER_EXPIRY_SMS.format(
        product_name=product_name,
        discount=discount_percent,
        time_left=time_left,
    )
