from __future__ import annotations

from budget_engine.models.money import Money
from .base import SupportsRate

"""Base-currency normalization.

Builds Money values from an amount, its currency and the user's base currency.
The rate used (and its timestamp) is frozen into the result; base_amount is
amount * rate exactly, with no rounding.
"""


def create_money(
    amount: float, currency: str, base_currency: str, rates: SupportsRate
) -> Money:
    fx = rates.rate(currency, base_currency)
    return Money(
        amount=amount,
        currency=currency,
        base_amount=amount * fx.rate,
        fx_rate=fx.rate,
        fx_timestamp=fx.timestamp,
    )
