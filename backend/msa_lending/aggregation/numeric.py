"""Numeric coercion for text cells.

HMDA publishes every column as text, with placeholders such as ``Exempt``
or ``NA`` in numeric fields.  A loan cell counts as numeric when it starts
with a decimal literal: ``"30"`` -> 30.0, ``"12.5%"`` -> 12.5,
``"Exempt"`` -> None.  Census income cells must be numeric as a whole.
"""
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Any

_LEADING_NUMBER = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)
_WHOLE_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_number(value: Any) -> float | None:
    """Return the leading numeric value of ``value``, or None if there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
        return None if math.isnan(num) else num

    match = _LEADING_NUMBER.match(str(value).lstrip())
    if match is None:
        return None
    return float(match.group(0).replace("Infinity", "inf"))


def parse_number(value: Any) -> float | None:
    """Return ``value`` as a number only if the whole cell is one.

    Surrounding whitespace is allowed; ``"49000abc"``, ``""`` and ``"nan"``
    give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
        return None if math.isnan(num) else num

    text = str(value).strip()
    if not _WHOLE_NUMBER.fullmatch(text):
        return None
    num = float(text)
    return num if math.isfinite(num) else None


def round_half_up(value: float, places: int = 2) -> float:
    """Round on the decimal representation, halves toward +infinity.

    ``round(2.675, 2)`` gives 2.67 because of binary representation; this
    gives 2.68, and the same answer on every platform.  Negative halves go
    up as well: -2.675 -> -2.67.
    """
    # Past 2**53 every float is already integral.
    if math.isnan(value) or math.isinf(value) or abs(value) >= 2**53:
        return value
    quantum = Decimal(1).scaleb(-places)
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(Decimal(repr(value)).quantize(quantum, rounding=rounding))
