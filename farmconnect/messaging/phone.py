from __future__ import annotations

import re

MIN_PHONE_LENGTH = 10
MIN_NATIONAL_DIGITS = 10
MAX_NATIONAL_DIGITS = 10
MAX_E164_DIGITS = 15
DEFAULT_COUNTRY_CODE = "+91"

_PHONE_SEPARATORS_RE = re.compile(r"[\s\-.()]")


def is_valid_recipient_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return len(phone.strip()) >= MIN_PHONE_LENGTH


def normalize_phone(raw_phone: str, *, default_country_code: str = DEFAULT_COUNTRY_CODE) -> str | None:
    """Reduce a stored phone number to the ``+<country><national>`` form.

    Numbers that already carry a ``+`` prefix are kept as they are if they fit
    E.164. Anything else loses its leading zeros, must leave exactly
    ``MAX_NATIONAL_DIGITS`` digits and gets ``default_country_code`` prepended.
    Returns ``None`` when the number cannot be sent to.
    """
    candidate = _PHONE_SEPARATORS_RE.sub("", raw_phone or "")
    if not candidate:
        return None

    if candidate.startswith("+"):
        digits = candidate[1:]
        if not digits.isdigit() or not MIN_NATIONAL_DIGITS <= len(digits) <= MAX_E164_DIGITS:
            return None
        return candidate

    if not candidate.isdigit():
        return None
    national = candidate.lstrip("0")
    if not MIN_NATIONAL_DIGITS <= len(national) <= MAX_NATIONAL_DIGITS:
        return None
    return f"{default_country_code}{national}"
