# logitrack/utils/thai_id.py

import re

_THIRTEEN_DIGITS = re.compile(r"[0-9]{13}")


def thai_id_check_digit(first_twelve: str) -> int:
    """Check digit for the first 12 digits of a Thai national ID / tax ID."""
    total = sum(int(digit) * (13 - i) for i, digit in enumerate(first_twelve[:12]))
    return (11 - total % 11) % 10


def is_valid_thai_id(value: str) -> bool:
    """True for a 13-digit string whose last digit matches the weighted check digit."""
    if not value or not _THIRTEEN_DIGITS.fullmatch(value):
        return False
    return thai_id_check_digit(value[:12]) == int(value[12])
