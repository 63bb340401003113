# logitrack/utils/plates.py
"""
Thai license plates.

Canonical form is <prefix>-<number>, where the prefix is two Thai letters or a
digit followed by two Thai letters: "กก-1234", "1กก-1234".
"""

import re

# Always fullmatch: "$" alone would accept a trailing newline
PLATE_PATTERN = re.compile(r"([ก-ฮ]{2}|[0-9][ก-ฮ]{2})-[0-9]{1,4}")

_DIGIT_PREFIX = re.compile(r"([0-9][ก-ฮ]{2})([0-9]+)")
_LETTER_PREFIX = re.compile(r"([ก-ฮ]{2})([0-9]+)")
_SEPARATORS = re.compile(r"[\s-]")


def format_license_plate(plate: str) -> str:
    """
    Insert the hyphen into a plate typed without one ("1กก1234" -> "1กก-1234").
    Spaces are dropped. Input that already has a hyphen but no recognizable
    prefix is returned unchanged.
    """
    if not plate:
        return ""

    cleaned = _SEPARATORS.sub("", plate)
    for pattern in (_DIGIT_PREFIX, _LETTER_PREFIX):
        match = pattern.fullmatch(cleaned)
        if match:
            return f"{match.group(1)}-{match.group(2)}"

    if "-" in plate:
        return plate
    return cleaned


def is_valid_license_plate(plate: str) -> bool:
    return bool(plate) and PLATE_PATTERN.fullmatch(plate) is not None
