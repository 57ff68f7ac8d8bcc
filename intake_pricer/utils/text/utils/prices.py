"""Price conversion helpers."""

from __future__ import annotations

import math
import re
from typing import Any


# Values above this are taken to be cents already; at or below, major units.
CENTS_THRESHOLD = 10000

_MONEY_NOISE_RE = re.compile(r"[$,\s]")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parse_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _MONEY_NOISE_RE.sub("", str(value))
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_cents(value: Any) -> int:
    """Convert a money value of unknown unit to cents.

    - "$12.50" / "12.50" / 12.5 -> 1250 (major units, x100)
    - "80000" / 80000 -> 80000 (above 10000: already cents)
    - exactly 10000 is still major units -> 1000000

    Unparseable input yields 0 ("unknown"), never an error.
    """
    number = _parse_number(value)
    if number is None:
        return 0
    if number > CENTS_THRESHOLD:
        return _round_half_up(number)
    return _round_half_up(number * 100)


def parse_cents(value: Any) -> int:
    """Read a value that is known to be in cents (``*_cents`` columns).

    "1250" -> 1250. Unparseable input yields 0.
    """
    number = _parse_number(value)
    if number is None:
        return 0
    return _round_half_up(number)
