"""Number text helpers for calcpad.

Parses operand text, rounds arithmetic results, renders them back to canonical
text, and groups integer digits for display. Digit grouping is looked up by
name so a different convention can be swapped in without touching the engine.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from calcpad.errors import InvalidOperandError

Grouping = Callable[[str], str]

# Operand texts are produced by the engine itself: typed digits with at most
# one point, or a previous result.
_OPERAND_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_operand(text: str) -> Optional[float]:
    """Parse operand text into a float.

    Returns None for empty text (no operand). Raises InvalidOperandError for
    anything that is not a decimal literal, e.g. a lone ".".
    """
    if text == "":
        return None
    if not _OPERAND_RE.fullmatch(text):
        raise InvalidOperandError(f"not a number: {text!r}")
    return float(text)


def round_result(value: float, precision: int = 13) -> float:
    """Round to ``precision`` fractional digits, halves rounding up.

    Removes binary floating-point noise such as 0.1 + 0.2 = 0.30000000000000004.
    Values too large to scale, or scales too large for a float, leave the
    value as is.
    """
    scale = 10 ** precision
    try:
        scaled = value * scale
    except OverflowError:
        return value
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / scale


def number_text(value: float) -> str:
    """Canonical decimal text for a finite result.

    Shortest round-trip digits written positionally (never "1e-7"), no
    trailing ".0", and "-0" collapses to "0".
    """
    if value == 0:
        return "0"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


# --- Digit grouping ---

def group_south_asian(digits: str) -> str:
    """Group the last three digits, then every two: "1000000" -> "10,00,000"."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = [tail]
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    groups.insert(0, head)
    return ",".join(groups)


def group_western(digits: str) -> str:
    """Group every three digits: "1000000" -> "1,000,000"."""
    return f"{int(digits):,}"


GROUPINGS: dict[str, Grouping] = {
    "south-asian": group_south_asian,
    "western": group_western,
}


def get_grouping(name: str) -> Grouping:
    """Look up a grouping function by name."""
    try:
        return GROUPINGS[name]
    except KeyError:
        choices = ", ".join(sorted(GROUPINGS))
        raise ValueError(f"Unknown grouping: {name!r}. Choose: {choices}") from None


def format_integer_part(text: str, grouping: Grouping = group_south_asian) -> str:
    """Format the integer part of an operand with digit grouping.

    Returns "" when the text does not parse as a number (e.g. the empty
    integer part of ".5"). The value is rounded to a whole number first.
    """
    try:
        value = parse_operand(text)
    except InvalidOperandError:
        return ""
    if value is None or not math.isfinite(value):
        return ""

    whole = Decimal(repr(value)).to_integral_value(rounding=ROUND_HALF_UP)
    digits = str(abs(int(whole)))
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    return sign + grouping(digits)
