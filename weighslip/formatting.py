"""Number and timestamp formatting for weighbridge receipts."""

from __future__ import annotations

import math
from datetime import datetime

_DIGIT_WORDS = [
    "ZERO", "ONE", "TWO", "THREE", "FOUR",
    "FIVE", "SIX", "SEVEN", "EIGHT", "NINE",
]


def coerce_number(value) -> int | float:
    """Parse a numeric field, falling back to 0 for anything unparseable.

    Integral values come back as ``int`` so they serialize and display
    without a trailing ``.0``.
    """
    if isinstance(value, bool) or value is None:
        return 0
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (ValueError, OverflowError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    if number.is_integer():
        return int(number)
    return number


def format_number(value) -> str:
    """Display a number the way the receipt shows it (14440, 12.5, -3)."""
    if value is None or value == "":
        return ""
    number = coerce_number(value)
    if isinstance(number, int):
        return str(number)
    return repr(number)


def _round_half_up(number: float) -> int:
    return math.floor(number + 0.5)


def weight_to_words(value) -> str:
    """Spell a weight digit by digit, e.g. 14440 -> ONE FOUR FOUR FOUR ZERO.

    The sign is dropped and fractions are rounded half up first.
    """
    if value is None or value == "" or isinstance(value, bool):
        return "ZERO"
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return "ZERO"
    if math.isnan(number) or math.isinf(number) or number == 0:
        return "ZERO"
    digits = str(abs(_round_half_up(number)))
    return " ".join(_DIGIT_WORDS[int(d)] for d in digits)


def parse_timestamp(value) -> datetime | None:
    """Parse a ``datetime`` or ISO string (``YYYY-MM-DDTHH:MM``)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def format_date(value) -> str:
    """``DD/MM/YYYY`` or an empty string."""
    ts = parse_timestamp(value)
    if ts is None:
        return ""
    return ts.strftime("%d/%m/%Y")


def format_time(value) -> str:
    """24-hour ``HH:MM`` or an empty string."""
    ts = parse_timestamp(value)
    if ts is None:
        return ""
    return ts.strftime("%H:%M")


def to_local_input(ts: datetime) -> str:
    """Render a datetime in the minute-precision form stored on receipts."""
    return ts.strftime("%Y-%m-%dT%H:%M")
