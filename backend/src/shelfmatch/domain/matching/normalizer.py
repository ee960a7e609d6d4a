"""Text normalization for receipt and label strings.

Turns noisy OCR output into a canonical form so that equivalent strings compare
equal: "  Coca-Cola  2L " and "coca-cola 2l" both become "coca-cola 2 l".

Steps (in order):
1. Unicode NFKC fold, trim, lowercase
2. Drop punctuation without semantic weight (periods, commas, symbols),
   keeping intra-word hyphens and decimal points between digits
3. Split glued quantity+unit tokens ("32oz" -> "32 oz")
4. Canonicalize unit/packaging abbreviations ("count" -> "ct")
5. Collapse whitespace

normalize() is idempotent: normalize(normalize(x)) == normalize(x).
"""

import re
import unicodedata
from typing import Dict, Optional

# Token -> canonical token. Canonical values must never appear as keys that map
# elsewhere, otherwise normalization would not be idempotent.
ABBREVIATIONS: Dict[str, str] = {
    # Count
    "count": "ct",
    "cnt": "ct",
    "cts": "ct",

    # Packs
    "pack": "pk",
    "packs": "pk",
    "pck": "pk",
    "pkg": "pk",
    "package": "pk",

    # Ounces
    "ounce": "oz",
    "ounces": "oz",
    "ozs": "oz",

    # Fluid ounces
    "floz": "fl-oz",

    # Pounds
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",

    # Grams / kilograms
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "grm": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "kgs": "kg",

    # Liters / milliliters
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "ltr": "l",
    "lt": "l",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "mls": "ml",

    # Gallons
    "gallon": "gal",
    "gallons": "gal",
    "gals": "gal",

    # Dozen / each
    "dozen": "dz",
    "doz": "dz",
    "each": "ea",

    # Containers
    "bottle": "btl",
    "bottles": "btl",
    "case": "cs",
    "cases": "cs",
    "carton": "ctn",
    "cartons": "ctn",
}

# Units that may be glued to a leading quantity ("12ct", "2.5kg").
UNIT_TOKENS = frozenset(ABBREVIATIONS) | frozenset(ABBREVIATIONS.values()) | {
    "ct", "pk", "oz", "lb", "g", "kg", "l", "ml", "gal", "dz", "ea", "btl", "cs", "ctn",
}

_THOUSANDS_SEPARATOR_RE = re.compile(r"(?<=\d),(?=\d{3}\b)")
_PERIOD_RE = re.compile(r"(?<!\d)\.|\.(?!\d)")
_SYMBOL_RE = re.compile(r"[^\w\s.\-]|_")
_LOOSE_HYPHEN_RE = re.compile(r"(?<!\w)-+|-+(?!\w)")
_GLUED_UNIT_RE = re.compile(r"\b(\d+(?:\.\d+)?)([a-z]+)\b")
_WHITESPACE_RE = re.compile(r"\s+")
_LINE_CODE_RE = re.compile(r"[a-z0-9]{4,16}")


def _split_glued_unit(match: "re.Match[str]") -> str:
    quantity, unit = match.group(1), match.group(2)
    if unit in UNIT_TOKENS:
        return f"{quantity} {unit}"
    return match.group(0)


def normalize(text: Optional[str]) -> str:
    """Normalize free text for comparison.

    Args:
        text: Raw text (receipt line, label, item name)

    Returns:
        Canonical text, or "" when nothing matchable remains
    """
    if not text:
        return ""

    value = unicodedata.normalize("NFKC", text).strip().lower()
    if not value:
        return ""

    value = _THOUSANDS_SEPARATOR_RE.sub("", value)
    value = _PERIOD_RE.sub("", value)
    value = value.replace(",", " ")
    value = _SYMBOL_RE.sub(" ", value)
    value = _LOOSE_HYPHEN_RE.sub(" ", value)
    value = _GLUED_UNIT_RE.sub(_split_glued_unit, value)

    tokens = [ABBREVIATIONS.get(token, token) for token in _WHITESPACE_RE.split(value) if token]
    return " ".join(tokens)


def extract_line_code(text: Optional[str]) -> Optional[str]:
    """Extract a store-specific item code from the start of a receipt line.

    Examples:
        "5523795 TERRA DATES $9.49" -> "5523795"
        "AB1234 SPONGES 2PK 4.99" -> "ab1234"
        "2 X MILK" -> None (quantity, not a code)

    Args:
        text: Raw or normalized receipt line

    Returns:
        Lowercase line code, or None if the line does not start with one
    """
    normalized = normalize(text)
    if not normalized:
        return None

    parts = normalized.split(" ")
    if len(parts) < 2:
        return None

    first = parts[0]
    if not _LINE_CODE_RE.fullmatch(first):
        return None
    if not any(ch.isdigit() for ch in first):
        return None

    # Remainder must carry a product description, not just prices
    if not any(ch.isalpha() for ch in " ".join(parts[1:])):
        return None

    return first
