"""Rounding helpers for amounts quoted in insight messages.

Both round half-up through Decimal; stored plan and transaction amounts are
never rounded.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def round_whole(value: float) -> int:
    """Half-up to an integer (the builtin round() goes half-to-even)."""
    return int(Decimal(str(value)).quantize(_UNITS, rounding=ROUND_HALF_UP))
