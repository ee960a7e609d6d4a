"""Barcode normalization and GTIN validation.

Check-digit validity is advisory: a barcode that fails the check (or is not a
GTIN at all) may still be stored and matched verbatim as a supplier code.
Nothing in this module raises for malformed input.
"""

import re
from dataclasses import dataclass
from typing import Optional

GTIN_LENGTHS = frozenset({8, 12, 13, 14})

_SEPARATOR_RE = re.compile(r"[\s\-]+")
_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class BarcodeInfo:
    normalized: str
    supported_length: bool
    check_digit_valid: Optional[bool]


def normalize_barcode(raw: Optional[str]) -> str:
    """Strip whitespace and hyphens injected by scanners. Digits are untouched."""
    if not raw:
        return ""
    return _SEPARATOR_RE.sub("", raw)


def is_supported_length(value: str) -> bool:
    """True for GTIN-8, GTIN-12 (UPC-A), GTIN-13 (EAN) and GTIN-14."""
    return len(value) in GTIN_LENGTHS


def check_digit_valid(value: str) -> Optional[bool]:
    """Validate the GTIN check digit.

    Digits are weighted 3, 1, 3, ... from the right, excluding the check digit
    itself. Expected check digit = (10 - sum % 10) % 10.

    Args:
        value: Normalized barcode

    Returns:
        True/False for numeric values of a supported length, None otherwise
        (validity unknown, not invalid)
    """
    if not value or not _DIGITS_RE.fullmatch(value) or not is_supported_length(value):
        return None

    digits = [int(ch) for ch in value]
    check_digit = digits.pop()

    total = 0
    for offset, digit in enumerate(reversed(digits)):
        total += digit * (3 if offset % 2 == 0 else 1)

    expected = (10 - total % 10) % 10
    return check_digit == expected


def describe_barcode(raw: Optional[str]) -> BarcodeInfo:
    normalized = normalize_barcode(raw)
    return BarcodeInfo(
        normalized=normalized,
        supported_length=is_supported_length(normalized),
        check_digit_valid=check_digit_valid(normalized),
    )
